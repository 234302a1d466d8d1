"""showroom Configuration.

Includes:
- AppConfig: Main application settings with environment variable support
- FinancingAssumptions: Business constants used by the financing engine
- FinancingTerms: Default loan terms used when a caller supplies none

Environment Variables:
    SHOWROOM_PROJECT_PATH: Project directory path
    SHOWROOM_CATALOG_PATH: Vehicle catalog file (JSON or YAML)
    SHOWROOM_LLM_MODEL: Ollama model used for intent enrichment
    SHOWROOM_LLM_ENDPOINT: Ollama API endpoint URL
    SHOWROOM_MAX_HISTORY_TURNS: Chat history window passed to the LLM
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FinancingAssumptions(BaseModel):
    """Simulated business assumptions for lease and subscription pricing.

    These are not market data. They are kept as named values so a deployment
    can override them without touching the formulas.

    Attributes:
        residual_ratio: Lease residual as a share of price when none is given
        money_factor_divisor: APR to money-factor conversion divisor
        subscription_vehicle_share: Share of the net amount a subscription recovers
        subscription_insurance: Fixed monthly insurance estimate
        subscription_maintenance: Fixed monthly maintenance estimate
    """

    model_config = ConfigDict(allow_inf_nan=False)

    residual_ratio: float = Field(default=0.55, gt=0, lt=1)
    money_factor_divisor: float = Field(default=2400.0, gt=0)
    subscription_vehicle_share: float = Field(default=0.6, gt=0, le=1)
    subscription_insurance: float = Field(default=150.0, ge=0)
    subscription_maintenance: float = Field(default=100.0, ge=0)


class FinancingTerms(BaseModel):
    """Loan terms applied when comparing vehicles without user-chosen terms."""

    model_config = ConfigDict(allow_inf_nan=False)

    down_payment: float = Field(default=2000.0, ge=0)
    apr: float = Field(default=5.5, ge=0, le=100)
    term_months: int = Field(default=60, gt=0)
    trade_in_value: float = Field(default=0.0, ge=0)
    tax_rate: float = Field(default=0.08, ge=0, le=1)


class AppConfig(BaseSettings):
    """Application configuration with environment variable support.

    Configuration is loaded from environment variables with SHOWROOM_ prefix.
    For example, SHOWROOM_LLM_ENDPOINT sets llm_endpoint.

    Precedence (highest to lowest):
        1. Environment variables (SHOWROOM_*)
        2. Config file (.showroom/config.yaml)
        3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="SHOWROOM_",
        env_nested_delimiter="__",
        arbitrary_types_allowed=True,
        extra="ignore",
    )

    project_path: Path = Field(default_factory=Path.cwd)

    # None means the packaged sample catalog
    catalog_path: Optional[Path] = None

    # LLM enrichment is disabled unless a model is named
    llm_model: Optional[str] = None
    llm_endpoint: str = "http://localhost:11434"

    max_history_turns: int = Field(default=10, ge=0)
    suggestion_limit: int = Field(default=5, gt=0)

    financing: FinancingAssumptions = Field(default_factory=FinancingAssumptions)
    default_terms: FinancingTerms = Field(default_factory=FinancingTerms)

    @classmethod
    def load(cls, path: Path) -> "AppConfig":
        """Load configuration from .showroom/config.yaml if it exists.

        Values already set through SHOWROOM_* environment variables are not
        overridden by the file.

        Args:
            path: Project path to load configuration for

        Returns:
            AppConfig with file values applied (or defaults if no config exists)
        """
        from ruamel.yaml import YAML

        config = cls(project_path=path)
        config_file = path / ".showroom" / "config.yaml"

        if not config_file.exists():
            return config

        yaml = YAML()
        with config_file.open() as f:
            data = yaml.load(f) or {}

        explicit = config.model_fields_set
        updates: dict = {}

        if "catalog_path" in data and "catalog_path" not in explicit:
            catalog = Path(data["catalog_path"])
            updates["catalog_path"] = catalog if catalog.is_absolute() else path / catalog
        for key in ("llm_model", "llm_endpoint", "max_history_turns", "suggestion_limit"):
            if key in data and key not in explicit:
                updates[key] = data[key]
        if data.get("financing") and "financing" not in explicit:
            updates["financing"] = FinancingAssumptions(**dict(data["financing"]))
        if data.get("default_terms") and "default_terms" not in explicit:
            updates["default_terms"] = FinancingTerms(**dict(data["default_terms"]))

        return config.model_copy(update=updates)

    def save(self) -> None:
        """Save configuration to .showroom/config.yaml in the project path."""
        from ruamel.yaml import YAML

        config_dir = self.project_path / ".showroom"
        config_dir.mkdir(parents=True, exist_ok=True)
        config_file = config_dir / "config.yaml"

        yaml = YAML()
        yaml.default_flow_style = False

        data = {
            "llm_model": self.llm_model,
            "llm_endpoint": self.llm_endpoint,
            "max_history_turns": self.max_history_turns,
            "suggestion_limit": self.suggestion_limit,
            "financing": self.financing.model_dump(),
            "default_terms": self.default_terms.model_dump(),
        }
        if self.catalog_path is not None:
            data["catalog_path"] = str(self.catalog_path)

        with config_file.open("w") as f:
            yaml.dump(data, f)


__all__ = ["AppConfig", "FinancingAssumptions", "FinancingTerms"]
