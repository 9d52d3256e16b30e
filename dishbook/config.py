from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql://postgres:postgres@db:5432/dishbook"
    anthropic_api_key: str = ""

    verifier_model: str = "claude-haiku-4-5-20251001"  # Short yes/no adjudication, small model is enough

    # Anthropic API timeout settings (seconds)
    anthropic_timeout: int = 30
    anthropic_connect_timeout: int = 10

    # Remote verifier endpoint used by HttpVerifierClient
    verifier_url: str = "http://localhost:8000/api/verify-product-match"
    verifier_timeout: float = 15.0

    # Run verifier escalations for a batch concurrently instead of one by one
    match_concurrently: bool = False

    class Config:
        env_file = ".env"


settings = Settings()
