from pydantic import BaseModel, Field
from typing import Optional, List, Union

Number = Union[int, float, str]


class GenerateImageRequest(BaseModel):
    prompt: Optional[str] = Field(default=None, description="Image prompt, required after trimming")
    size: Optional[str] = Field(default=None, description="'1K', '2K', '4K' or 'custom'; anything else means '2K'")
    aspectRatio: Optional[str] = Field(default=None, description="Aspect ratio such as '16:9', or 'match_input_image'")
    sequentialImageGeneration: Optional[str] = Field(default=None, description="'disabled' or 'auto'")
    maxImages: Optional[Number] = Field(default=None, description="1-15, only used when sequential generation is 'auto'")
    width: Optional[Number] = Field(default=None, description="1024-4096, required when size is 'custom'")
    height: Optional[Number] = Field(default=None, description="1024-4096, required when size is 'custom'")
    imageInput: Optional[Union[List[Optional[str]], str]] = Field(default=None, description="Reference image URL or list of URLs")
    inputImage: Optional[str] = Field(default=None, description="Single reference image URL (flux-kontext)")
    outputFormat: Optional[str] = Field(default=None, description="'jpg' or 'png'")
    safetyTolerance: Optional[Number] = Field(default=None, description="0-6, at most 2 with an input image (flux-kontext)")
    seed: Optional[Number] = Field(default=None, description="Random seed (flux-kontext)")


class GenerateImageResponse(BaseModel):
    imageData: str = Field(description="Base64-encoded image bytes")
    mimeType: str = Field(description="Mime type of the encoded image")


class ErrorResponse(BaseModel):
    error: str = Field(description="Human-readable failure message")
