"""Prompt templates for the text and image models."""

IMPROVE_PROMPT_SYSTEM = """You are a prompt engineering expert specializing in visual AI.
Your task is to refine and enhance user-provided prompts for an image filter generator.
Make the prompt more descriptive, artistic, and detailed to produce a more dramatic and visually appealing effect.
Return ONLY the improved prompt text, without any introductory phrases like "Here's the improved prompt:"."""

RANDOM_PROMPT_SYSTEM = (
    "You are a creative assistant for an AI image generator. Your task is to "
    "generate imaginative and visually rich prompts. Be concise."
)

RANDOM_PROMPT_REQUEST = (
    "Generate a random, creative, and visually descriptive prompt for an AI image "
    "generator. The prompt should be a single sentence and not enclosed in quotes."
)

FILTER_CONCEPT_SYSTEM = (
    "You design image filters. A filter has a short, catchy name, a one-sentence "
    "exciting description of what it does, and a detailed, artistic prompt that "
    "commands an AI image model to apply the effect."
)

FULL_FILTER_REQUEST = 'Generate a creative and unique image filter concept based on the theme: "{theme}".'

TRENDING_FILTER_REQUEST = (
    'Generate a new, creative, and "trending" image filter concept for {today}. '
    "Think about current social media trends, aesthetics (like cottagecore, "
    "cyberpunk, Y2K), seasons, or pop culture."
)

CATEGORIZE_REQUEST = """Categorize the following image filter. "Useful" filters are for practical adjustments like color correction, sharpening, or specific styles like 'black and white'. "Fun" filters are more artistic, creative, or whimsical, like turning a photo into a cartoon or a painting.
Filter Name: "{name}"
Description: "{description}"
Prompt: "{prompt}"
Based on this, is the filter primarily 'Useful' or 'Fun'?"""

FILTER_PREVIEW_IMAGE = 'A photo filter named "{name}". The style is: {description}.'

TRENDING_PREVIEW_IMAGE = 'A trending photo filter named "{name}". The style is: {description}.'

STYLE_PREVIEW_IMAGE = "Generate a high-quality preview image: {description}"
