"""
Share service implementation.

Shares a filtered image through the platform's share capability when one is
available, and otherwise uploads it and creates a link to a share record.
"""

import logging
import re
import uuid
from typing import Optional

from modules.auth.interfaces import IAuthClient
from modules.auth.models import UserSession
from modules.filters.models import Filter
from modules.generation.images import parse_data_url
from shared.exceptions import FilterFusionError, PermissionDeniedError

from .exceptions import ShareCancelledError, ShareError, ShareNotFoundError, ShareSignInRequiredError
from .interfaces import IShareRepository, IStorageClient, NativeShare
from .models import Share, ShareFile, ShareMethod, ShareResult

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s")


class ShareService:
    """Share flow and share-link resolution."""

    def __init__(
        self,
        storage: IStorageClient,
        repository: IShareRepository,
        auth: IAuthClient,
        app_url: str,
    ) -> None:
        self._storage = storage
        self._repository = repository
        self._auth = auth
        self._app_url = app_url

    def share_link(self, share_id: str) -> str:
        return f"{self._app_url}?share={share_id}"

    async def share_image(
        self,
        image_data_url: str,
        filter: Filter,
        session: Optional[UserSession],
        native_share: Optional[NativeShare] = None,
    ) -> ShareResult:
        """
        Share a filtered image.

        Native sharing is tried first; cancelling it, or any failure, falls
        through to uploading the image and creating a share link.

        Raises:
            InvalidImageDataError: The image is not a data URL
            ShareSignInRequiredError: Link sharing without a session, or with one
                that could not be refreshed
            ShareError: Upload or metadata save failed
        """
        image = parse_data_url(image_data_url)

        if native_share is not None:
            share_file = ShareFile(
                filename=f"filtered-{_WHITESPACE_RE.sub('-', filter.name.lower())}.{image.extension}",
                mime_type=image.mime_type,
                data=image.data,
            )
            text = (
                f"Check out this image I created with the '{filter.name}' filter! "
                f"Create your own here: {self._app_url}"
            )
            if native_share.can_share(share_file):
                try:
                    await native_share.share(share_file, title=filter.name, text=text)
                    return ShareResult(method=ShareMethod.SHARED)
                except ShareCancelledError:
                    logger.info("Native share was cancelled; creating a link instead")
                except Exception as e:
                    logger.warning(f"Native share failed, creating a link instead: {e}")

        if session is None:
            raise ShareSignInRequiredError()
        token = await self._auth.get_valid_token()
        if token is None:
            raise ShareSignInRequiredError()

        try:
            path = f"shares/{session.uid}/{uuid.uuid4()}.{image.extension}"
            image_url = await self._storage.upload(path, image.data, image.mime_type, token=token)
            share = await self._repository.create(
                {
                    "imageUrl": image_url,
                    "userId": session.uid,
                    "username": session.email,
                    "filterId": filter.id,
                    "filterName": filter.name,
                },
                auth_token=token,
            )
        except ShareError:
            raise
        except PermissionDeniedError as e:
            logger.error(f"Share upload refused for user {session.uid}")
            raise ShareError(e.message)
        except FilterFusionError as e:
            logger.error(f"Share link creation failed: {e.message}")
            raise ShareError(e.message)

        link = self.share_link(share.id)
        logger.info(f"Created share {share.id} for filter {filter.id}")
        return ShareResult(method=ShareMethod.LINK, link=link, share_id=share.id)

    async def get_share(self, share_id: str) -> Share:
        """
        Resolve an incoming share link.

        Raises:
            ShareNotFoundError: The id does not exist
        """
        share = await self._repository.get(share_id)
        if share is None:
            raise ShareNotFoundError(share_id)
        return share
