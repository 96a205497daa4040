"""Configuration management for property-ledger."""

import os
from dataclasses import dataclass, field
from typing import Any

from property_ledger.exceptions import ConfigurationError

DEFAULT_ORACLE_URL = "https://www.alphavantage.co/query"


@dataclass
class RateOracleConfig:
    """Exchange rate oracle configuration."""

    url: str = DEFAULT_ORACLE_URL
    api_key: str = ""
    from_currency: str = "BTC"
    to_currency: str = "USD"
    timeout_seconds: float = 10.0

    def params(self) -> dict[str, str]:
        """Query parameters for the currency exchange endpoint."""
        return {
            "function": "CURRENCY_EXCHANGE_RATE",
            "from_currency": self.from_currency,
            "to_currency": self.to_currency,
            "apikey": self.api_key,
        }


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration for the ledger backend."""

    host: str = "localhost"
    port: int = 5432
    database: str = "ledger"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class KafkaConfig:
    """Kafka producer configuration for commit notifications."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    retries: int = 3
    topic: str = "ledger.properties"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "retries": self.retries,
        }


@dataclass
class RegistryConfig:
    """Main configuration for property-ledger."""

    oracle: RateOracleConfig = field(default_factory=RateOracleConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    publish_events: bool = False
    optimistic_writes: bool = True
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """Create config from environment variables."""
        oracle = RateOracleConfig(
            url=os.getenv("RATE_ORACLE_URL", DEFAULT_ORACLE_URL),
            api_key=os.getenv("RATE_ORACLE_API_KEY", ""),
            from_currency=os.getenv("RATE_FROM_CURRENCY", "BTC"),
            to_currency=os.getenv("RATE_TO_CURRENCY", "USD"),
            timeout_seconds=_float_env("RATE_TIMEOUT", "10"),
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=_int_env("POSTGRES_PORT", "5432"),
            database=os.getenv("POSTGRES_DB", "ledger"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic=os.getenv("KAFKA_TOPIC", "ledger.properties"),
        )

        return cls(
            oracle=oracle,
            postgres=postgres,
            kafka=kafka,
            publish_events=os.getenv("PUBLISH_EVENTS", "false").lower() == "true",
            optimistic_writes=os.getenv("OPTIMISTIC_WRITES", "true").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value
