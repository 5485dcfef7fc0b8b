from tradepnl.core.entities.charges import ChargeRates
from tradepnl.core.entities.trade import TradeEconomics, TradeInput, TradeStatus


def compute_trade_economics(trade: TradeInput, rates: ChargeRates) -> TradeEconomics:
    """
    Gross/net P&L, itemised charges, break-even, ROI and risk for one trade.

    Pure and total: inputs are already coerced to non-negative numbers by
    TradeInput, so nothing here raises. Charges are only realised on a
    closed position (entry and exit both set) and only when the caller
    asks for them.
    """
    quantity = trade.lots * trade.lot_size
    direction = 1 if trade.is_buy else -1
    entry, exit_ = trade.entry_price, trade.exit_price

    points = (exit_ - entry) * direction
    gross_pnl = points * quantity

    # Not clamped: a stop on the wrong side of entry shows up as negative risk
    risk_amount = 0.0
    if trade.stop_loss_price > 0 and entry > 0:
        if trade.is_buy:
            risk_points = entry - trade.stop_loss_price
        else:
            risk_points = trade.stop_loss_price - entry
        risk_amount = risk_points * quantity

    capital_required = entry * quantity

    charges = dict(
        brokerage_fee=0.0, stt=0.0, txn_charge=0.0, gst=0.0,
        stamp_duty=0.0, sebi_fees=0.0, total_charges=0.0,
    )
    if trade.include_charges and quantity > 0 and entry > 0 and exit_ > 0:
        charges = _itemise_charges(trade, quantity, rates)

    total_charges = charges["total_charges"]
    net_pnl = gross_pnl - total_charges

    break_even_offset = total_charges / quantity if quantity > 0 else 0.0
    if trade.is_buy:
        break_even_price = entry + break_even_offset
    else:
        break_even_price = entry - break_even_offset

    roi_pct = (net_pnl / capital_required) * 100 if capital_required > 0 else 0.0

    return TradeEconomics(
        quantity=quantity,
        gross_pnl=gross_pnl,
        points=points,
        risk_amount=risk_amount,
        capital_required=capital_required,
        net_pnl=net_pnl,
        break_even_price=break_even_price,
        roi_pct=roi_pct,
        status=TradeStatus.CLOSED if exit_ > 0 else TradeStatus.OPEN,
        **charges,
    )


def _itemise_charges(trade: TradeInput, quantity: float, rates: ChargeRates) -> dict:
    entry, exit_ = trade.entry_price, trade.exit_price
    turnover = (entry + exit_) * quantity

    # One entry order + one exit order
    brokerage_fee = rates.brokerage_per_order * 2

    # STT is levied on the sell leg, stamp duty on the buy leg
    sell_value = (exit_ if trade.is_buy else entry) * quantity
    buy_value = (entry if trade.is_buy else exit_) * quantity

    stt = sell_value * rates.stt_pct / 100
    txn_charge = turnover * rates.txn_charge_pct / 100
    gst = (brokerage_fee + txn_charge) * rates.gst_pct / 100
    stamp_duty = buy_value * rates.stamp_duty_pct / 100
    sebi_fees = turnover * rates.sebi_fees_pct / 100

    return {
        "brokerage_fee": brokerage_fee,
        "stt": stt,
        "txn_charge": txn_charge,
        "gst": gst,
        "stamp_duty": stamp_duty,
        "sebi_fees": sebi_fees,
        "total_charges": brokerage_fee + stt + txn_charge + gst + stamp_duty + sebi_fees,
    }
