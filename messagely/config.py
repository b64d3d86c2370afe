import os

from dotenv import load_dotenv


load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./messagely.db")

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7))

# bcrypt work factor
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
