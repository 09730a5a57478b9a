"""
Configuration schema validation using Pydantic
"""

from typing import List, Literal, Optional

from eth_utils import is_hex_address
from pydantic import BaseModel, Field, field_validator

MAX_UINT128 = (1 << 128) - 1


def _validate_address(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    if not is_hex_address(v):
        raise ValueError(f"Invalid address: {v}")
    return v


class HopConfig(BaseModel):
    """Single hop of the configured route"""

    kind: Literal["v2", "v3"] = Field(description="Pool implementation family")
    sell: Literal["token0", "token1"] = Field(description="Reserve token sold")
    pool: str = Field(description="Pool contract address")

    @field_validator("pool")
    @classmethod
    def validate_pool(cls, v):
        if not _validate_address(v):
            raise ValueError("pool address cannot be empty")
        return v

    model_config = {"extra": "forbid"}


class RequestConfig(BaseModel):
    """Arbitrage request amounts (in wei) and route"""

    input_amount: int = Field(ge=0, le=MAX_UINT128)
    min_profit: int = Field(ge=0, le=MAX_UINT128)
    hops: List[HopConfig] = Field(min_length=1)

    model_config = {"extra": "forbid"}


class ContractsConfig(BaseModel):
    """Contract addresses; each may instead come from the environment"""

    arbitrage: Optional[str] = None
    weth: Optional[str] = None
    usdc: Optional[str] = None

    @field_validator("arbitrage", "weth", "usdc")
    @classmethod
    def validate_contract(cls, v):
        return _validate_address(v)

    model_config = {"extra": "forbid"}


class ExecutorConfigSchema(BaseModel):
    """Complete executor configuration schema"""

    network: str = Field(default="ethereum", min_length=1)
    rpc_url_env: str = Field(default="ETH_PROVIDER_URL", min_length=1)
    rpc_url: str = ""
    private_key_env: str = Field(default="WALLET_PRIVATE_KEY", min_length=1)
    owner_address: Optional[str] = None
    contracts: ContractsConfig = Field(default_factory=ContractsConfig)

    approval_amount: int = Field(default=10**18, ge=0)
    approval_multiplier: int = Field(default=2, ge=1, le=1000)
    step_delay_sec: float = Field(default=2.0, ge=0, le=600)
    gas_limit: int = Field(default=500_000, ge=21_000, le=30_000_000)
    receipt_timeout_sec: float = Field(default=120.0, gt=0, le=3600)

    request: RequestConfig

    @field_validator("owner_address")
    @classmethod
    def validate_owner(cls, v):
        return _validate_address(v)

    model_config = {
        "extra": "forbid",
        "validate_assignment": True,
    }
