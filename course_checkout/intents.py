from course_checkout.config import Settings
from course_checkout.qr import format_amount
from course_checkout.schemas import (
    AllowedPaymentMethod,
    CardParameters,
    MerchantInfo,
    PaymentIntentDescriptor,
    TokenizationSpecification,
    TransactionInfo,
)

ALLOWED_AUTH_METHODS = ["PAN_ONLY", "CRYPTOGRAM_3DS"]
ALLOWED_CARD_NETWORKS = ["MASTERCARD", "VISA"]


def build_google_pay_intent(price, settings: Settings) -> PaymentIntentDescriptor:
    """
    Shape a Google Pay PaymentDataRequest for the client widget.
    Nothing here talks to a payment network; the widget does that itself.
    """
    card = AllowedPaymentMethod(
        type="CARD",
        parameters=CardParameters(
            allowed_auth_methods=list(ALLOWED_AUTH_METHODS),
            allowed_card_networks=list(ALLOWED_CARD_NETWORKS),
        ),
        tokenization_specification=TokenizationSpecification(
            type="PAYMENT_GATEWAY",
            parameters={
                "gateway": settings.payment_gateway,
                "gatewayMerchantId": settings.merchant_id,
            },
        ),
    )
    return PaymentIntentDescriptor(
        api_version=2,
        api_version_minor=0,
        allowed_payment_methods=[card],
        merchant_info=MerchantInfo(merchant_id=settings.merchant_id, merchant_name=settings.merchant_name),
        transaction_info=TransactionInfo(
            total_price_status="FINAL",
            total_price=format_amount(price),
            currency_code=settings.currency_code,
        ),
    )
