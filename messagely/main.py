import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import LOG_LEVEL
from .database import init_db
from .errors import register_exception_handlers
from .routes import auth_router, messages_router, users_router


def setup_logging(level: str = LOG_LEVEL) -> None:
	logging.basicConfig(
		level=level.upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)


setup_logging()
init_db()

app = FastAPI(title="Messagely")

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(messages_router)


@app.get("/health")
def health_check():
	return {"status": "ok"}
