"""
Configuration loading and normalization for the arbitrage executor.

Reads a YAML file, validates it against the Pydantic schema, then resolves
endpoint, credentials and contract addresses from the environment into a
frozen runtime config. Call ``dotenv.load_dotenv()`` first to pick up a
local ``.env`` file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from eth_utils import is_hex_address, to_checksum_address
from pydantic import ValidationError as PydanticValidationError

from .config_schema import ExecutorConfigSchema, RequestConfig
from .exceptions import ConfigurationError
from .types import ArbitrageRequest, Hop, PoolKind, SellSide

# Environment overrides for contract and owner addresses
ARBITRAGE_CONTRACT_ENV = "ARBITRAGE_CONTRACT_ADDRESS"
WETH_CONTRACT_ENV = "IWETH_CONTRACT_ADDRESS"
USDC_CONTRACT_ENV = "IUSDC_CONTRACT_ADDRESS"
OWNER_ADDRESS_ENV = "OWNER_ADDRESS"

POOL_KINDS = {"v2": PoolKind.UNISWAP_V2, "v3": PoolKind.UNISWAP_V3}
SELL_SIDES = {"token0": SellSide.TOKEN0, "token1": SellSide.TOKEN1}


@dataclass(frozen=True)
class ExecutorConfig:
    """Immutable runtime configuration object."""

    network: str
    rpc_url: str
    private_key: Optional[str]
    arbitrage_address: str
    weth_address: str
    usdc_address: str
    owner_address: Optional[str]
    approval_amount: int
    approval_multiplier: int
    step_delay_sec: float
    gas_limit: int
    receipt_timeout_sec: float
    request: ArbitrageRequest

    @property
    def total_approval(self) -> int:
        return self.approval_amount * self.approval_multiplier


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load and parse YAML configuration file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if config_dict is None:
        raise ConfigurationError(f"Empty configuration file: {config_path}")
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Configuration file must contain a YAML mapping: {config_path}"
        )

    return config_dict


def build_request(request_config: RequestConfig) -> ArbitrageRequest:
    """Convert the validated request section into an ArbitrageRequest."""
    hops = [
        Hop.from_address(POOL_KINDS[hop.kind], SELL_SIDES[hop.sell], hop.pool)
        for hop in request_config.hops
    ]
    return ArbitrageRequest(
        input_amount=request_config.input_amount,
        min_profit=request_config.min_profit,
        hops=tuple(hops),
    )


def _resolve_address(
    env: Mapping[str, str], env_key: str, configured: Optional[str], label: str
) -> str:
    value = env.get(env_key) or configured
    if not value:
        raise ConfigurationError(
            f"{label} address not configured (set {env_key} or contracts.{label})",
            {"env": env_key},
        )
    if not is_hex_address(value):
        raise ConfigurationError(f"{env_key} is not a valid address: {value}")
    return to_checksum_address(value)


def normalize_config(
    config_dict: Dict[str, Any],
    env: Optional[Mapping[str, str]] = None,
    paper_mode: bool = False,
) -> ExecutorConfig:
    """
    Validate a configuration dictionary and resolve environment values.

    Args:
        config_dict: Raw configuration (usually parsed YAML)
        env: Environment mapping, defaults to ``os.environ``
        paper_mode: Dry run; no RPC endpoint is required

    Raises:
        ConfigurationError: If validation fails or a required value is missing
    """
    env = os.environ if env is None else env

    try:
        schema = ExecutorConfigSchema(**config_dict)
    except (PydanticValidationError, TypeError) as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e

    rpc_url = env.get(schema.rpc_url_env) or schema.rpc_url
    if not rpc_url and not paper_mode:
        raise ConfigurationError(
            f"RPC URL environment variable {schema.rpc_url_env} not set and no rpc_url in config"
        )

    owner = env.get(OWNER_ADDRESS_ENV) or schema.owner_address
    if owner and not is_hex_address(owner):
        raise ConfigurationError(f"{OWNER_ADDRESS_ENV} is not a valid address: {owner}")

    return ExecutorConfig(
        network=schema.network,
        rpc_url=rpc_url,
        private_key=env.get(schema.private_key_env) or None,
        arbitrage_address=_resolve_address(
            env, ARBITRAGE_CONTRACT_ENV, schema.contracts.arbitrage, "arbitrage"
        ),
        weth_address=_resolve_address(
            env, WETH_CONTRACT_ENV, schema.contracts.weth, "weth"
        ),
        usdc_address=_resolve_address(
            env, USDC_CONTRACT_ENV, schema.contracts.usdc, "usdc"
        ),
        owner_address=to_checksum_address(owner) if owner else None,
        approval_amount=schema.approval_amount,
        approval_multiplier=schema.approval_multiplier,
        step_delay_sec=schema.step_delay_sec,
        gas_limit=schema.gas_limit,
        receipt_timeout_sec=schema.receipt_timeout_sec,
        request=build_request(schema.request),
    )


def load_request(config_path: Union[str, Path]) -> ArbitrageRequest:
    """
    Load only the ``request`` section of a configuration file.

    Endpoint, credential and contract settings are not required, so this
    works offline for encoding and inspection.
    """
    config_dict = load_yaml_config(config_path)
    if "request" not in config_dict:
        raise ConfigurationError(f"Missing 'request' section in {config_path}")
    try:
        request_config = RequestConfig(**config_dict["request"])
    except (PydanticValidationError, TypeError) as e:
        raise ConfigurationError(f"Request validation failed: {e}") from e
    return build_request(request_config)


def load_config(
    config_path: Union[str, Path],
    env: Optional[Mapping[str, str]] = None,
    paper_mode: bool = False,
) -> ExecutorConfig:
    """
    Load and normalize an executor configuration file.

    Raises:
        ConfigurationError: If the file cannot be loaded or is invalid
    """
    return normalize_config(load_yaml_config(config_path), env, paper_mode=paper_mode)
