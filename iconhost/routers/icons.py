from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Request
from starlette.concurrency import run_in_threadpool
from ..core.deps import category_store, github_mirror, upload_pipeline
from ..core.errors import DuplicateFileError, NotFoundError, ValidationError
from ..core.models import (
    CategoryListResponse,
    DeleteRequest,
    DeleteResult,
    IconEntry,
    IconListResponse,
    StructureResponse,
    UploadResult,
)
from ..icons import multipart
from ..icons.pipeline import UploadRequest, delete_icon

router = APIRouter(prefix="/api", tags=["icons"])


@router.get("/icons", response_model=IconListResponse, summary="List all icons")
def list_icons():
    try:
        icons = category_store().list_all()
        return IconListResponse(count=len(icons), icons=icons)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"list_failed {e}")


@router.get("/categories", response_model=CategoryListResponse, summary="List categories")
def list_categories():
    try:
        return CategoryListResponse(categories=sorted(category_store().list_categories()))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"list_failed {e}")


@router.get("/structure", response_model=StructureResponse, summary="Folder structure")
def get_structure():
    try:
        return StructureResponse(structure=category_store().get_structure())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"structure_failed {e}")


@router.get("/info", response_model=IconEntry, summary="Details of one icon")
def get_info(
    category: str = Query(..., description="Category, e.g. `social` or `custom/tech`"),
    file_name: str = Query(..., alias="fileName"),
):
    try:
        return category_store().get_info(category, file_name)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="not_found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"info_failed {e}")


# The form is parsed by hand so the uploaded bytes reach the pipeline untouched.
@router.post(
    "/upload",
    response_model=UploadResult,
    status_code=201,
    summary="Upload an icon (SVG/PNG/ICO/WEBP)",
    description=(
        "multipart/form-data fields:\n"
        "- `file` (required): the icon file.\n"
        "- `category` (required): `social`, `ui`, `brands`, `flags` or `custom`.\n"
        "- `customFolder`: sub-folder name, required when category is `custom`.\n"
        "- `customName`: file name to use instead of the uploaded one.\n"
        "- `description`: free text echoed back in the result.\n"
        "- `compress`: send `false` to store raster files as-is."
    ),
)
async def upload_icon(request: Request, background_tasks: BackgroundTasks):
    try:
        boundary = multipart.boundary_from_content_type(request.headers.get("content-type"))
        if not boundary:
            raise ValidationError("invalid_content_type")
        parts = multipart.parse(await request.body(), boundary)

        file_part = multipart.first_file(parts)
        if file_part is None:
            raise ValidationError("missing_file")
        fields = multipart.fields_of(parts)

        req = UploadRequest(
            file_bytes=file_part.data,
            original_filename=file_part.filename,
            category=fields.get("category", ""),
            custom_folder=fields.get("customFolder") or None,
            description=fields.get("description", ""),
            compress=fields.get("compress") != "false",
            custom_name=fields.get("customName") or None,
        )
        # Pillow re-encoding and fsync stay off the event loop
        result = await run_in_threadpool(upload_pipeline().upload, req)
    except DuplicateFileError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"upload_failed {e}")

    background_tasks.add_task(github_mirror().notify, "upload", result.file_name, result.category)
    return result


@router.post("/delete", response_model=DeleteResult, summary="Delete an icon")
def delete(req: DeleteRequest, background_tasks: BackgroundTasks):
    try:
        result = delete_icon(category_store(), req.file_name, req.category)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="not_found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"delete_failed {e}")

    background_tasks.add_task(github_mirror().notify, "delete", req.file_name, req.category)
    return result


@router.get("/repo-info", summary="Repository backing the CDN")
def repo_info():
    try:
        return {"success": True, "info": github_mirror().repository_info()}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"repo_info_failed {e}")
