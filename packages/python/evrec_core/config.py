from functools import lru_cache

from dotenv import find_dotenv, load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


# Per-component weights of the final score, ordered [term, tag, category, host, distance]
TERM_WEIGHT = 1.0
TAG_WEIGHT = 0.4
CATEGORY_WEIGHT = 0.6
HOST_WEIGHT = 0.7
DISTANCE_WEIGHT = 1.5

BLEND_WEIGHT = 0.5  # share of item-item similarity in the blended score
MAX_RESULTS_CAP = 256  # hard cap on page size for ranking queries

EARTH_RADIUS_KM = 6371.0088

CORPUS_TABLE_DOCUMENT_TERMS = "document_term_count"
CORPUS_TABLE_ASSOCIATIONS = "term_association"
ITEMS_TABLE = "events"
INTERACTIONS_TABLE = "user_interactions"


class Settings(BaseSettings):
    app_name: str = "evrec"
    # credentials
    supabase_url: str | None = None
    supabase_api_key: str | None = None
    # ranking
    max_results_cap: int = MAX_RESULTS_CAP
    # tokenizer
    nltk_data_path: str | None = None
    # env config
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv(find_dotenv(), override=False)
    return Settings()
