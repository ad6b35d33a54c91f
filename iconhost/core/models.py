from typing import Optional, List, Dict
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (`fileName`, `lastModified`)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class IconEntry(CamelModel):
    name: str
    category: str
    size: int
    # Only known at upload time; listings read from disk leave it unset
    original_size: Optional[int] = None
    size_human: str
    last_modified: str
    url: str

class UploadResult(CamelModel):
    success: bool = True
    file_name: str
    category: str
    original_size: int
    compressed_size: int
    compressed: bool = False
    description: Optional[str] = None
    url: str

class DeleteResult(CamelModel):
    success: bool = True
    message: str

class DeleteRequest(CamelModel):
    file_name: str
    category: str

class IconListResponse(CamelModel):
    success: bool = True
    count: int
    icons: List[IconEntry]

class CategoryListResponse(CamelModel):
    success: bool = True
    categories: List[str]

class StructureResponse(CamelModel):
    success: bool = True
    structure: Dict[str, List[str]]


def format_file_size(num_bytes: int) -> str:
    """Render a byte count as `0 Bytes`, `512 Bytes`, `1.5 KB`, `2 MB`."""
    if num_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {units[i]}"
