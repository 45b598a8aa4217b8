"""Configuration module for the Chainfolio server."""

# Standard library imports
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, FrozenSet, Optional, Tuple

# Third-party library imports
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Values shipped in example .env files that must be treated as "no key"
PLACEHOLDER_KEYS = frozenset({"", "your_alchemy_key_here", "changeme"})

FEATURE_TOKENS = "tokens"
FEATURE_NFTS = "nfts"
FEATURE_ORDINALS = "ordinals"


def get_env_var(key: str, default: Any = None, required: bool = False,
                validator: Optional[callable] = None) -> Any:
    """Get and validate environment variable.

    Args:
        key: Environment variable name
        default: Default value if not present
        required: If True, raises ValueError when not found
        validator: Optional validation function

    Returns:
        The environment variable value or default

    Raises:
        ValueError: If required and not found, or fails validation
    """
    value = os.environ.get(key)

    if value is None:
        if required:
            raise ValueError(f"Required environment variable '{key}' not found")
        return default

    if validator:
        try:
            return validator(value)
        except Exception as e:
            raise ValueError(f"Invalid value for environment variable '{key}': {str(e)}")

    return value


def bool_validator(value: str) -> bool:
    """Convert string to boolean."""
    return value.lower() in ("true", "1", "yes", "y", "on")


def int_validator(value: str) -> int:
    """Validate and convert string to integer.

    Raises:
        ValueError: If not a valid integer
    """
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a valid integer")


def positive_int_validator(value: str) -> int:
    number = int_validator(value)
    if number < 1:
        raise ValueError(f"'{value}' must be a positive integer")
    return number


def float_validator(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a valid number")


def url_validator(value: str) -> str:
    """Validate URL format.

    Args:
        value: URL to validate

    Returns:
        The validated URL without a trailing slash

    Raises:
        ValueError: If not a valid URL format
    """
    url_pattern = re.compile(
        r'^(https?):\/\/'  # http:// or https://
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+(?:[A-Z]{2,6}\.?|[A-Z0-9-]{2,}\.?)|'  # domain
        r'localhost|'  # localhost
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # or IPv4
        r'(?::\d+)?'  # optional port
        r'(?:/?|[/?]\S+)$', re.IGNORECASE)

    if not url_pattern.match(value):
        raise ValueError(f"'{value}' is not a valid URL")
    return value.rstrip("/")


def log_level_validator(value: str) -> str:
    """Validate log level.

    Raises:
        ValueError: If not a valid log level
    """
    valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    upper_value = value.upper()
    if upper_value not in valid_levels:
        raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
    return upper_value


def environment_validator(value: str) -> str:
    """Validate environment name.

    Raises:
        ValueError: If not a valid environment name
    """
    valid_environments = ("development", "testing", "staging", "production")
    if value.lower() not in valid_environments:
        raise ValueError(f"Environment must be one of: {', '.join(valid_environments)}")
    return value.lower()


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for the HTTP server."""

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.environment not in ("development", "testing", "staging", "production"):
            raise ValueError(f"Invalid environment: {self.environment}")

        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log_level: {self.log_level}")


@lru_cache()
def get_server_config() -> ServerConfig:
    """Get server configuration from environment variables.

    Returns:
        ServerConfig instance

    Raises:
        ValueError: If environment variables fail validation
    """
    return ServerConfig(
        host=get_env_var("HOST", "0.0.0.0"),
        port=get_env_var("PORT", 8000, validator=int_validator),
        debug=get_env_var("DEBUG", False, validator=bool_validator),
        environment=get_env_var("ENVIRONMENT", "development", validator=environment_validator),
        log_level=get_env_var("LOG_LEVEL", "INFO", validator=log_level_validator),
        cors_origins=tuple(get_env_var("CORS_ORIGINS", "*").split(",")),
    )


@dataclass(frozen=True)
class ApiKeys:
    """Optional provider keys. A missing key disables the feature it gates."""

    alchemy: Optional[str] = None

    @property
    def has_alchemy(self) -> bool:
        return bool(self.alchemy) and self.alchemy.strip() not in PLACEHOLDER_KEYS


@lru_cache()
def get_api_keys() -> ApiKeys:
    """Get provider keys from environment variables."""
    return ApiKeys(alchemy=get_env_var("ALCHEMY_API_KEY"))


@dataclass(frozen=True)
class FetchConfig:
    """Configuration for outbound requests made by chain handlers."""

    request_timeout: float = 20.0  # seconds
    rpc_max_retries: int = 2
    rpc_retry_delay: float = 0.5  # seconds, doubled on every retry
    token_scan_concurrency: int = 4
    user_agent: str = "Chainfolio/0.1"


@lru_cache()
def get_fetch_config() -> FetchConfig:
    """Get outbound request configuration from environment variables."""
    return FetchConfig(
        request_timeout=get_env_var("REQUEST_TIMEOUT", 20.0, validator=float_validator),
        rpc_max_retries=get_env_var("RPC_MAX_RETRIES", 2, validator=int_validator),
        rpc_retry_delay=get_env_var("RPC_RETRY_DELAY", 0.5, validator=float_validator),
        token_scan_concurrency=get_env_var("TOKEN_SCAN_CONCURRENCY", 4, validator=positive_int_validator),
        user_agent=get_env_var("USER_AGENT", "Chainfolio/0.1"),
    )


@dataclass(frozen=True)
class RelayConfig:
    """Configuration for the inscription content relay."""

    content_host: str = "https://ordinals.com"
    timeout: float = 10.0  # seconds
    cache_seconds: int = 86400
    # Prefix used when building relay URLs for inscriptions ("" keeps them same-origin)
    public_base: str = ""

    def content_url(self, inscription_id: str) -> str:
        """URL of the relay route serving the given inscription."""
        return f"{self.public_base}/content/{inscription_id}"

    def upstream_url(self, inscription_id: str) -> str:
        return f"{self.content_host}/content/{inscription_id}"


@lru_cache()
def get_relay_config() -> RelayConfig:
    """Get content relay configuration from environment variables."""
    public_base = get_env_var("RELAY_PUBLIC_BASE", "")
    return RelayConfig(
        content_host=get_env_var("CONTENT_HOST", "https://ordinals.com", validator=url_validator),
        timeout=get_env_var("RELAY_TIMEOUT", 10.0, validator=float_validator),
        cache_seconds=get_env_var("RELAY_CACHE_SECONDS", 86400, validator=int_validator),
        public_base=public_base.rstrip("/"),
    )


@dataclass(frozen=True)
class TokenSpec:
    """A fungible token contract scanned for balances."""

    address: str
    symbol: str
    name: str
    decimals: int


@dataclass(frozen=True)
class ChainDescriptor:
    """Read-only description of a supported chain."""

    key: str
    name: str
    symbol: str
    id_prefix: str
    kind: str  # "evm" or "bitcoin"
    address_format: str  # "hex", "base58" or "bech32"
    decimals: int
    features: FrozenSet[str] = frozenset()
    rpc_url: Optional[str] = None
    api_base: Optional[str] = None
    tokens: Tuple[TokenSpec, ...] = ()
    token_standard: Optional[str] = None
    nft_api_url: Optional[str] = None
    chain_id: Optional[int] = None
    explorer_url: Optional[str] = None

    def has_feature(self, feature: str) -> bool:
        return feature in self.features


ETHEREUM_TOKENS = (
    TokenSpec("0x2b591e99afE9f32eAA6214f7B7629768c40Eeb39", "HEX", "HEX", 8),
    TokenSpec("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", "USDC", "USD Coin", 6),
    TokenSpec("0xdAC17F958D2ee523a2206206994597C13D831ec7", "USDT", "Tether USD", 6),
    TokenSpec("0x514910771AF9Ca656af840dff83E8264EcF986CA", "LINK", "Chainlink", 18),
)

PULSECHAIN_TOKENS = (
    TokenSpec("0x2b591e99afE9f32eAA6214f7B7629768c40Eeb39", "HEX", "HEX", 8),
    TokenSpec("0xA1077a294dDE1B09bB078844df40758a5D0f9a27", "PLSX", "PulseX", 18),
    TokenSpec("0x15D38573d2feeb82e7ad5187aB8c1D52810B1f07", "INC", "Incentive", 18),
)


def build_chain_registry(api_keys: Optional[ApiKeys] = None) -> Dict[str, ChainDescriptor]:
    """Build the mapping of chain key -> ChainDescriptor.

    RPC URLs default to public endpoints and can be overridden via environment
    variables. Ethereum switches to Alchemy when a real key is configured.

    Args:
        api_keys: Provider keys; defaults to environment-based keys

    Returns:
        Chain registry keyed by chain key, in display order
    """
    api_keys = api_keys or get_api_keys()

    if api_keys.has_alchemy:
        eth_rpc_default = f"https://eth-mainnet.g.alchemy.com/v2/{api_keys.alchemy}"
    else:
        eth_rpc_default = "https://ethereum.publicnode.com"

    return {
        "bitcoin": ChainDescriptor(
            key="bitcoin",
            name="Bitcoin",
            symbol="BTC",
            id_prefix="btc",
            kind="bitcoin",
            address_format="bech32",
            decimals=8,
            features=frozenset({FEATURE_ORDINALS}),
            api_base=get_env_var("BTC_API_BASE", "https://blockstream.info/api", validator=url_validator),
            explorer_url="https://mempool.space",
        ),
        "ethereum": ChainDescriptor(
            key="ethereum",
            name="Ethereum",
            symbol="ETH",
            id_prefix="eth",
            kind="evm",
            address_format="hex",
            decimals=18,
            features=frozenset({FEATURE_TOKENS, FEATURE_NFTS}),
            rpc_url=get_env_var("ETH_RPC_URL", eth_rpc_default, validator=url_validator),
            tokens=ETHEREUM_TOKENS,
            token_standard="ERC-20",
            nft_api_url="https://eth-mainnet.g.alchemy.com/v2/{api_key}/getNFTs/",
            chain_id=1,
            explorer_url="https://etherscan.io",
        ),
        "pulsechain": ChainDescriptor(
            key="pulsechain",
            name="Pulse",
            symbol="PLS",
            id_prefix="pls",
            kind="evm",
            address_format="hex",
            decimals=18,
            features=frozenset({FEATURE_TOKENS}),
            rpc_url=get_env_var("PULSECHAIN_RPC_URL", "https://rpc.pulsechain.com", validator=url_validator),
            tokens=PULSECHAIN_TOKENS,
            token_standard="PRC-20",
            chain_id=369,
            explorer_url="https://scan.pulsechain.com",
        ),
    }


@lru_cache()
def get_chain_registry() -> Dict[str, ChainDescriptor]:
    """Get the environment-based chain registry (cached)."""
    return build_chain_registry()

