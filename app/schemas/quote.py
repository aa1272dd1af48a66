from pydantic import BaseModel, ConfigDict, Field


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    price: float
    previous_close: float = Field(alias="previousClose")
    change: float
    change_percent: float = Field(alias="changePercent")
    day_high: float = Field(alias="dayHigh")
    day_low: float = Field(alias="dayLow")
    volume: int = Field(default=0, ge=0)
    market_state: str = Field(default="UNKNOWN", alias="marketState")
    currency: str = "INR"
    symbol: str
    timestamp: str
    is_demo: bool | None = Field(default=None, alias="isDemo")
    from_cache: bool | None = Field(default=None, alias="fromCache")

    def to_payload(self) -> dict:
        """JSON body for API consumers; unset flags are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
