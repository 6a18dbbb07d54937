"""Unit tests for proposal action parsing and helpers."""

from decimal import Decimal

import pytest

from forum_engine.domain.errors import InvalidProposalActionError
from forum_engine.domain.models.proposal_action import (
    ActionKind,
    AddLiquidityAction,
    LimitOrderAction,
    RemoveLiquidityAction,
    SwapAction,
    SwapParams,
    action_amount,
    action_kind,
    action_pool,
    parse_proposal_action,
    parse_proposal_hooks,
)
from tests.helpers.factories import swap_payload


class TestParseProposalAction:
    """Tests for parse_proposal_action()."""

    def test_swap(self) -> None:
        action = parse_proposal_action(swap_payload("0.5", slippage=0.01, deadline=1800))

        assert isinstance(action, SwapAction)
        assert action.params.token_in == "ETH"
        assert action.params.token_out == "USDC"
        assert action.params.slippage == 0.01
        assert action_kind(action) is ActionKind.SWAP

    def test_add_liquidity(self) -> None:
        action = parse_proposal_action(
            {
                "action": "addLiquidity",
                "params": {
                    "pool": "ETH-USDC",
                    "amount0": "1.5",
                    "tickLower": -600,
                    "tickUpper": 600,
                },
            }
        )

        assert isinstance(action, AddLiquidityAction)
        assert action.params.tick_lower == -600
        assert action_kind(action) is ActionKind.ADD_LIQUIDITY

    def test_remove_liquidity(self) -> None:
        action = parse_proposal_action(
            {
                "action": "removeLiquidity",
                "params": {"tokenId": "42", "liquidityAmount": "1000"},
            }
        )

        assert isinstance(action, RemoveLiquidityAction)
        assert action.params.token_id == "42"

    def test_limit_order(self) -> None:
        action = parse_proposal_action(
            {
                "action": "limitOrder",
                "params": {
                    "tokenIn": "ETH",
                    "tokenOut": "USDC",
                    "amount": "2",
                    "targetTick": 201000,
                    "zeroForOne": True,
                },
            }
        )

        assert isinstance(action, LimitOrderAction)
        assert action.params.zero_for_one is True

    def test_snake_case_construction(self) -> None:
        params = SwapParams(token_in="ETH", token_out="DAI", amount="3")
        assert SwapAction(params=params).kind == "swap"

    def test_unknown_tag(self) -> None:
        with pytest.raises(InvalidProposalActionError):
            parse_proposal_action({"action": "bridge", "params": {}})

    @pytest.mark.parametrize("amount", ["0", "-1", "abc", "NaN"])
    def test_invalid_amount(self, amount: str) -> None:
        with pytest.raises(InvalidProposalActionError) as exc_info:
            parse_proposal_action(swap_payload(amount))

        assert any("amount" in loc for loc, _ in exc_info.value.errors)

    def test_unknown_param_key_rejected(self) -> None:
        with pytest.raises(InvalidProposalActionError):
            parse_proposal_action(swap_payload(recipient="0xabc"))

    def test_add_liquidity_requires_an_amount(self) -> None:
        with pytest.raises(InvalidProposalActionError, match="amount0/amount1"):
            parse_proposal_action({"action": "addLiquidity", "params": {"pool": "ETH-USDC"}})

    def test_add_liquidity_tick_order(self) -> None:
        with pytest.raises(InvalidProposalActionError, match="tickLower"):
            parse_proposal_action(
                {
                    "action": "addLiquidity",
                    "params": {
                        "pool": "ETH-USDC",
                        "amount1": "10",
                        "tickLower": 60,
                        "tickUpper": 60,
                    },
                }
            )

    def test_actions_are_frozen(self) -> None:
        from pydantic import ValidationError

        action = parse_proposal_action(swap_payload())
        with pytest.raises(ValidationError):
            action.params.amount = "2"


class TestParseProposalHooks:
    """Tests for parse_proposal_hooks()."""

    def test_none_means_no_hooks(self) -> None:
        assert parse_proposal_hooks(None) is None

    def test_valid_hooks(self) -> None:
        hooks = parse_proposal_hooks(
            {
                "hooksAddress": "0x" + "ab" * 20,
                "hookData": "0x01ff",
                "antiSandwich": {"enabled": True},
                "dynamicFee": {"enabled": True, "feeBps": 30},
            }
        )

        assert hooks is not None
        assert hooks.anti_sandwich_enabled
        assert hooks.dynamic_fee is not None
        assert hooks.dynamic_fee.fee_bps == 30

    def test_bad_address(self) -> None:
        with pytest.raises(InvalidProposalActionError):
            parse_proposal_hooks({"hooksAddress": "0x1234"})

    def test_fee_out_of_range(self) -> None:
        with pytest.raises(InvalidProposalActionError):
            parse_proposal_hooks({"overrideFee": {"enabled": True, "feeBps": 10_001}})

    def test_disabled_anti_sandwich(self) -> None:
        hooks = parse_proposal_hooks({"antiSandwich": {"enabled": False}})
        assert hooks is not None
        assert not hooks.anti_sandwich_enabled


class TestActionHelpers:
    """Tests for action_amount() and action_pool()."""

    def test_swap_amount_and_pool(self) -> None:
        action = parse_proposal_action(swap_payload("12.5"))

        assert action_amount(action) == Decimal("12.5")
        assert action_pool(action) == "ETH-USDC"

    def test_liquidity_pool_without_amount(self) -> None:
        action = parse_proposal_action(
            {"action": "addLiquidity", "params": {"pool": "WBTC-ETH", "amount1": "1"}}
        )

        assert action_amount(action) is None
        assert action_pool(action) == "WBTC-ETH"

    def test_remove_liquidity_pool_needs_both_currencies(self) -> None:
        partial = parse_proposal_action(
            {
                "action": "removeLiquidity",
                "params": {"tokenId": "7", "liquidityAmount": "5", "currency0": "ETH"},
            }
        )
        full = parse_proposal_action(
            {
                "action": "removeLiquidity",
                "params": {
                    "tokenId": "7",
                    "liquidityAmount": "5",
                    "currency0": "ETH",
                    "currency1": "USDC",
                },
            }
        )

        assert action_pool(partial) is None
        assert action_pool(full) == "ETH-USDC"
