"""
Sale and Break-Even Calculations

Selling costs are agent_fee_rate% of the sale price plus a fixed agent fee
plus other costs. The break-even price is the sale price S at which

    S * (1 - rate/100) - fixed_fee - other_costs - remaining_loan - net_cash = 0

i.e. proceeds after selling costs and loan payoff exactly recover the net
cash the investor has put in.
"""

from resim.calculations.numeric import ieee_divide


def calculate_selling_costs(
    sale_price: float,
    agent_fee_rate: float,
    agent_fee_fixed: float,
    other_costs: float,
) -> float:
    """Total cost of selling at `sale_price` (agent_fee_rate in percent)."""
    return sale_price * (agent_fee_rate / 100) + agent_fee_fixed + other_costs


def calculate_net_proceeds(
    sale_price: float, selling_costs: float, remaining_loan: float
) -> float:
    """Cash left after paying selling costs and retiring the loan."""
    return sale_price - selling_costs - remaining_loan


def calculate_break_even_price(
    remaining_loan: float,
    net_cash_invested: float,
    agent_fee_rate: float,
    agent_fee_fixed: float,
    other_selling_costs: float,
) -> float:
    """
    Solve for the break-even sale price.

    Args:
        remaining_loan: Outstanding loan balance
        net_cash_invested: Net cash put in to date (callers clamp to >= 0)
        agent_fee_rate: Agent fee in percent of sale price, must be < 100
        agent_fee_fixed: Fixed agent fee
        other_selling_costs: Other selling costs

    Returns:
        Sale price. Not clamped; an agent_fee_rate of 100 gives inf or nan
        instead of raising.
    """
    fixed_costs = agent_fee_fixed + other_selling_costs
    rate = agent_fee_rate / 100

    return ieee_divide(remaining_loan + net_cash_invested + fixed_costs, 1 - rate)
