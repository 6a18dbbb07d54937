"""Proposal action variants.

A proposal carries exactly one on-chain action drawn from a closed set:
swap, add-liquidity, remove-liquidity and limit-order. Each variant has
its own parameter shape. The variants form a tagged union discriminated
by the ``action`` key, so dispatch is an exhaustive match on the variant
type instead of a lookup on an untyped record.

Payloads use the camelCase keys produced by the proposing agents, e.g.:

    {
        "action": "swap",
        "params": {"tokenIn": "ETH", "tokenOut": "USDC", "amount": "0.5"},
    }

Python callers may construct the models with snake_case field names.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from forum_engine.domain.errors.proposal import InvalidProposalActionError

# Fee tiers are expressed in basis points
MAX_FEE_BPS = 10_000


class ActionKind(Enum):
    """Closed set of actions a forum can agree to execute."""

    SWAP = "swap"
    ADD_LIQUIDITY = "addLiquidity"
    REMOVE_LIQUIDITY = "removeLiquidity"
    LIMIT_ORDER = "limitOrder"


class _ActionModel(BaseModel):
    """Shared model config: frozen, camelCase aliases, no unknown keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )


def _validate_amount(value: str) -> str:
    """Check that an amount string is a positive decimal."""
    try:
        parsed = Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"amount must be a decimal string, got {value!r}") from exc
    if not parsed.is_finite() or parsed <= 0:
        raise ValueError(f"amount must be positive, got {value!r}")
    return value


Amount = Annotated[str, AfterValidator(_validate_amount)]


# =============================================================================
# Parameter shapes
# =============================================================================


class SwapParams(_ActionModel):
    """Parameters for swapping one token for another."""

    token_in: str = Field(min_length=1)
    token_out: str = Field(min_length=1)
    amount: Amount
    slippage: float | None = Field(default=None, ge=0.0, le=1.0)
    deadline: int | None = Field(default=None, gt=0)


class AddLiquidityParams(_ActionModel):
    """Parameters for providing liquidity to a pool range."""

    pool: str = Field(min_length=1)
    amount0: Amount | None = None
    amount1: Amount | None = None
    tick_lower: int | None = None
    tick_upper: int | None = None

    @model_validator(mode="after")
    def check_range(self) -> AddLiquidityParams:
        if self.amount0 is None and self.amount1 is None:
            raise ValueError("at least one of amount0/amount1 is required")
        if (
            self.tick_lower is not None
            and self.tick_upper is not None
            and self.tick_lower >= self.tick_upper
        ):
            raise ValueError("tickLower must be below tickUpper")
        return self


class RemoveLiquidityParams(_ActionModel):
    """Parameters for withdrawing liquidity from an existing position."""

    token_id: str = Field(min_length=1)
    liquidity_amount: Amount
    currency0: str | None = None
    currency1: str | None = None
    recipient: str | None = None
    amount0_min: str | None = None
    amount1_min: str | None = None


class LimitOrderParams(_ActionModel):
    """Parameters for a limit order placed at a target tick."""

    token_in: str = Field(min_length=1)
    token_out: str = Field(min_length=1)
    amount: Amount
    target_tick: int
    zero_for_one: bool


# =============================================================================
# Execution hooks
# =============================================================================


class ToggleHook(_ActionModel):
    enabled: bool


class LimitOrderHook(_ActionModel):
    enabled: bool
    target_tick: int
    zero_for_one: bool


class FeeHook(_ActionModel):
    enabled: bool
    fee_bps: int = Field(ge=0, le=MAX_FEE_BPS)


class ProposalHooks(_ActionModel):
    """Optional execution hook flags attached to a proposal.

    Attributes:
        hooks_address: Deployed hook contract included in the pool key.
        hook_data: Hex-encoded data passed through to the hook contract.
        anti_sandwich: MEV protection toggle.
        limit_order: Limit order hook settings.
        dynamic_fee: Dynamic fee hook settings.
        override_fee: Fee override hook settings.
    """

    hooks_address: str | None = Field(default=None, pattern=r"^0x[a-fA-F0-9]{40}$")
    hook_data: str | None = Field(default=None, pattern=r"^0x[a-fA-F0-9]*$")
    anti_sandwich: ToggleHook | None = None
    limit_order: LimitOrderHook | None = None
    dynamic_fee: FeeHook | None = None
    override_fee: FeeHook | None = None

    @property
    def anti_sandwich_enabled(self) -> bool:
        return self.anti_sandwich is not None and self.anti_sandwich.enabled


# =============================================================================
# Tagged union
# =============================================================================


class SwapAction(_ActionModel):
    kind: Literal["swap"] = Field(default="swap", alias="action")
    params: SwapParams


class AddLiquidityAction(_ActionModel):
    kind: Literal["addLiquidity"] = Field(default="addLiquidity", alias="action")
    params: AddLiquidityParams


class RemoveLiquidityAction(_ActionModel):
    kind: Literal["removeLiquidity"] = Field(default="removeLiquidity", alias="action")
    params: RemoveLiquidityParams


class LimitOrderAction(_ActionModel):
    kind: Literal["limitOrder"] = Field(default="limitOrder", alias="action")
    params: LimitOrderParams


ProposalAction = Annotated[
    Union[SwapAction, AddLiquidityAction, RemoveLiquidityAction, LimitOrderAction],
    Field(discriminator="kind"),
]

_ACTION_ADAPTER: TypeAdapter[ProposalAction] = TypeAdapter(ProposalAction)
_HOOKS_ADAPTER: TypeAdapter[ProposalHooks] = TypeAdapter(ProposalHooks)


def action_kind(action: ProposalAction) -> ActionKind:
    """Return the ActionKind enum member for an action variant."""
    return ActionKind(action.kind)


def _flatten_errors(exc: ValidationError) -> list[tuple[str, str]]:
    return [
        (".".join(str(part) for part in error["loc"]) or "<root>", error["msg"])
        for error in exc.errors()
    ]


def parse_proposal_action(payload: Mapping[str, Any]) -> ProposalAction:
    """Validate a raw action payload into its typed variant.

    Args:
        payload: Mapping with an ``action`` tag and a ``params`` mapping.

    Returns:
        The matching action variant.

    Raises:
        InvalidProposalActionError: If the tag is unknown or the params do
            not fit the variant's shape.
    """
    try:
        return _ACTION_ADAPTER.validate_python(dict(payload))
    except ValidationError as exc:
        raise InvalidProposalActionError(_flatten_errors(exc)) from exc


def parse_proposal_hooks(payload: Mapping[str, Any] | None) -> ProposalHooks | None:
    """Validate a raw hooks payload. ``None`` means no hooks."""
    if payload is None:
        return None
    try:
        return _HOOKS_ADAPTER.validate_python(dict(payload))
    except ValidationError as exc:
        raise InvalidProposalActionError(_flatten_errors(exc)) from exc


def action_amount(action: ProposalAction) -> Decimal | None:
    """Return the single token amount an action trades, if it has one.

    Liquidity actions move a pair of amounts (or a liquidity share) and
    have no single headline amount.
    """
    match action:
        case SwapAction(params=params) | LimitOrderAction(params=params):
            return Decimal(params.amount)
        case _:
            return None


def action_pool(action: ProposalAction) -> str | None:
    """Return a pool identifier for an action (explicit pool or token pair)."""
    match action:
        case AddLiquidityAction(params=params):
            return params.pool
        case SwapAction(params=params) | LimitOrderAction(params=params):
            return f"{params.token_in}-{params.token_out}"
        case RemoveLiquidityAction(params=params):
            if params.currency0 and params.currency1:
                return f"{params.currency0}-{params.currency1}"
            return None
