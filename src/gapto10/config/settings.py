from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class Settings:
    data_path: str = os.getenv("GAPTO10_DATA_PATH", "gapto10.json")
    log_level: str = os.getenv("GAPTO10_LOG_LEVEL", "INFO").upper()


settings = Settings()
