from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from .core.config import settings
from .core.logger import configure_logging
from .routers.icons import router as icons_router

configure_logging(settings.log_level)

tags_metadata = [
    {
        "name": "icons",
        "description": (
            "Endpoints to upload, list and delete icons.\n\n"
            "- Upload via multipart (SVG/PNG/ICO/WEBP, up to 50MB).\n"
            "- Raster files are recompressed unless `compress=false`.\n"
            "- Icons live under `icons/<category>/` or `icons/custom/<folder>/`."
        ),
    }
]

app = FastAPI(
    title="Icon Host",
    description=(
        "How to Use:\n\n"
        "1) Upload an icon: POST /api/upload with a `file`, a `category` and, for `custom`, a `customFolder`.\n"
        "2) List icons: GET /api/icons, or GET /api/categories and GET /api/structure for the folder tree.\n"
        "3) Delete: POST /api/delete with `{\"fileName\": ..., \"category\": ...}`.\n\n"
        "Notes: every change is mirrored to the GitHub repository when a token is configured, "
        "and icons are served from the CDN or from /icons locally."
    ),
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.include_router(icons_router)
app.mount("/icons", StaticFiles(directory=settings.icons_dir, check_dir=False), name="icons")
