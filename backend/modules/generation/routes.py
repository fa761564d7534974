"""
Generation API endpoints.

One POST endpoint per generative operation. Errors are raised as
FilterFusionError subclasses and rendered by the application's exception
handler as {"error", "code"} bodies.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_generation_service

from .interfaces import IGenerationService
from .models import (
    ApplyFilterRequest,
    CategorizeFilterRequest,
    CategoryResponse,
    GeneratedFilter,
    GenerateFullFilterRequest,
    GeneratePreviewRequest,
    ImageResponse,
    ImprovedPromptResponse,
    ImprovePromptRequest,
    RandomPromptResponse,
)

router = APIRouter()


@router.post("/apply-filter", response_model=ImageResponse, response_model_by_alias=True)
async def apply_filter(
    request: ApplyFilterRequest,
    service: IGenerationService = Depends(get_generation_service),
) -> ImageResponse:
    """
    Apply a filter prompt to one image (`image`) or merge several (`images`).
    """
    image_url = await service.apply_filter(request.all_images(), request.prompt)
    return ImageResponse(image_url=image_url)


@router.post("/generate-preview", response_model=ImageResponse, response_model_by_alias=True)
async def generate_preview(
    request: GeneratePreviewRequest,
    service: IGenerationService = Depends(get_generation_service),
) -> ImageResponse:
    image_url = await service.generate_preview(request.description)
    return ImageResponse(image_url=image_url)


@router.post("/improve-prompt", response_model=ImprovedPromptResponse, response_model_by_alias=True)
async def improve_prompt(
    request: ImprovePromptRequest,
    service: IGenerationService = Depends(get_generation_service),
) -> ImprovedPromptResponse:
    improved = await service.improve_prompt(request.current_prompt)
    return ImprovedPromptResponse(improved_prompt=improved)


@router.post("/random-prompt", response_model=RandomPromptResponse)
async def random_prompt(
    service: IGenerationService = Depends(get_generation_service),
) -> RandomPromptResponse:
    return RandomPromptResponse(prompt=await service.generate_random_prompt())


@router.post("/generate-full-filter", response_model=GeneratedFilter, response_model_by_alias=True)
async def generate_full_filter(
    request: GenerateFullFilterRequest,
    service: IGenerationService = Depends(get_generation_service),
) -> GeneratedFilter:
    """
    Generate a complete filter concept for a theme, preview image included.
    """
    return await service.generate_full_filter(request.theme)


@router.post("/categorize-filters", response_model=CategoryResponse)
async def categorize_filter(
    request: CategorizeFilterRequest,
    service: IGenerationService = Depends(get_generation_service),
) -> CategoryResponse:
    category = await service.categorize_filter(request.name, request.description, request.prompt)
    return CategoryResponse(category=category.value)


@router.post("/generate-trending-filters", response_model=GeneratedFilter, response_model_by_alias=True)
async def generate_trending_filter(
    service: IGenerationService = Depends(get_generation_service),
) -> GeneratedFilter:
    return await service.generate_trending_filter()
