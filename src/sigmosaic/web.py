import logging
import os
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path

from fastapi import BackgroundTasks, FastAPI, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from sigmosaic.codec import CONTENT_TYPE
from sigmosaic.config import DEFAULT_PROFILE, get_profile
from sigmosaic.converter import collage_to_bytes
from sigmosaic.errors import CollageError
from sigmosaic.storage import CollageStore

logger = logging.getLogger(__name__)

ATTACHMENT_NAME = "signature_collage.jpg"
MAX_LISTED = 100


@dataclass
class Settings:
    upload_dir: Path = Path("uploads")
    db_path: Path | None = None
    profile: str = DEFAULT_PROFILE
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = True
    cors_max_age: int = 3600
    persist: bool = True

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        upload_dir = Path(env.get("SIGMOSAIC_UPLOAD_DIR", "uploads"))
        db_path = env.get("SIGMOSAIC_DB_PATH")
        origins = [o.strip() for o in env.get("SIGMOSAIC_CORS_ORIGINS", "*").split(",") if o.strip()]
        return cls(
            upload_dir=upload_dir,
            db_path=Path(db_path) if db_path else None,
            profile=env.get("SIGMOSAIC_PROFILE", DEFAULT_PROFILE),
            cors_origins=origins or ["*"],
            cors_allow_credentials=env.get("SIGMOSAIC_CORS_CREDENTIALS", "1") not in ("0", "false", "no"),
            cors_max_age=int(env.get("SIGMOSAIC_CORS_MAX_AGE", "3600")),
            persist=env.get("SIGMOSAIC_PERSIST", "1") not in ("0", "false", "no"),
        )

    def open_store(self) -> CollageStore | None:
        if not self.persist:
            return None
        db_path = self.db_path or self.upload_dir / "collages.sqlite3"
        return CollageStore(db_path, self.upload_dir)


def _persist(store: CollageStore, data: bytes) -> None:
    """Keep a copy of a delivered collage; the response has already been sent."""
    try:
        store.save(data)
    except (OSError, sqlite3.Error):
        logger.exception("Failed to store generated collage")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the HTTP app. Run with ``uvicorn --factory sigmosaic.web:create_app``."""
    settings = settings or Settings.from_env()
    store = settings.open_store()

    app = FastAPI(title="sigmosaic")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        max_age=settings.cors_max_age,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post(
        "/api/collage",
        response_class=Response,
        responses={200: {"content": {CONTENT_TYPE: {}}}},
    )
    async def collage_endpoint(
        background_tasks: BackgroundTasks,
        portrait: UploadFile = File(...),
        signature: UploadFile = File(...),
        profile: str | None = None,
    ):
        portrait_bytes = await portrait.read()
        signature_bytes = await signature.read()
        try:
            config = get_profile(profile or settings.profile)
            data = await run_in_threadpool(collage_to_bytes, portrait_bytes, signature_bytes, config)
        except CollageError as exc:
            logger.exception("Collage generation failed")
            raise HTTPException(
                status_code=500,
                detail={"error": type(exc).__name__, "source": exc.source, "message": str(exc)},
            ) from exc

        if store is not None:
            background_tasks.add_task(_persist, store, data)
        return Response(
            content=data,
            media_type=CONTENT_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{ATTACHMENT_NAME}"'},
        )

    @app.get("/api/collages")
    async def recent_collages(limit: int = Query(20, ge=1, le=MAX_LISTED)):
        if store is None:
            return []
        return [
            {
                "id": r.id,
                "generated_name": r.generated_name,
                "storage_path": r.storage_path,
                "created_at": r.created_at.isoformat(),
            }
            for r in store.list_recent(limit)
        ]

    return app
