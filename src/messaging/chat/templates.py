"""Text templates for system messages posted on order lifecycle events."""


def _short(order_id: str) -> str:
    return str(order_id)[:8]


class OrderPlacedTemplate:
    @staticmethod
    def render(context: dict) -> str:
        return (
            f"New order #{_short(context['order_id'])} placed: "
            f"{context.get('item_count', 0)} item(s), total {context.get('currency', 'BDT')} "
            f"{float(context.get('total_amount', 0.0)):.2f}."
        )


class PaymentInitiatedTemplate:
    @staticmethod
    def render(context: dict) -> str:
        return (
            f"Payment of {context.get('currency', 'BDT')} {float(context.get('amount', 0.0)):.2f} "
            f"initiated for order #{_short(context['order_id'])}."
        )


class PaymentOutcomeTemplate:
    _PHRASES = {
        "paid": "Payment received",
        "failed": "Payment failed",
        "cancelled": "Payment was cancelled",
    }

    @classmethod
    def render(cls, context: dict) -> str:
        phrase = cls._PHRASES.get(context["payment_status"], f"Payment {context['payment_status']}")
        text = f"{phrase} for order #{_short(context['order_id'])}."
        if context.get("transaction_id"):
            text += f" Transaction: {context['transaction_id']}."
        return text


class StatusUpdateTemplate:
    @staticmethod
    def render(context: dict) -> str:
        return f"Order #{_short(context['order_id'])} is now {context['new_status']}."
