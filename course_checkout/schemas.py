from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    # accept and emit the camelCase keys the checkout widget speaks
    model_config = ConfigDict(populate_by_name=True)


class QuoteRequest(_CamelModel):
    course_id: Optional[str] = Field(None, alias="courseId")


class VerifyPaymentRequest(_CamelModel):
    course_id: Optional[str] = Field(None, alias="courseId")
    transaction_id: Optional[str] = Field(None, alias="transactionId")
    payment_method: Optional[str] = Field(None, alias="paymentMethod")


class UpiPaymentDescriptor(_CamelModel):
    qr_code: str = Field(alias="qrCode")
    amount: float
    course: str
    upi_string: str = Field(alias="upiString")


class EnrollmentConfirmation(_CamelModel):
    course_id: str = Field(alias="courseId")
    course_name: str = Field(alias="courseName")
    transaction_id: str = Field(alias="transactionId")


class CardParameters(_CamelModel):
    allowed_auth_methods: List[str] = Field(alias="allowedAuthMethods")
    allowed_card_networks: List[str] = Field(alias="allowedCardNetworks")


class TokenizationSpecification(_CamelModel):
    type: str = "PAYMENT_GATEWAY"
    parameters: dict


class AllowedPaymentMethod(_CamelModel):
    type: str = "CARD"
    parameters: CardParameters
    tokenization_specification: TokenizationSpecification = Field(alias="tokenizationSpecification")


class MerchantInfo(_CamelModel):
    merchant_id: str = Field(alias="merchantId")
    merchant_name: str = Field(alias="merchantName")


class TransactionInfo(_CamelModel):
    total_price_status: str = Field("FINAL", alias="totalPriceStatus")
    total_price: str = Field(alias="totalPrice")
    currency_code: str = Field(alias="currencyCode")


class PaymentIntentDescriptor(_CamelModel):
    api_version: int = Field(2, alias="apiVersion")
    api_version_minor: int = Field(0, alias="apiVersionMinor")
    allowed_payment_methods: List[AllowedPaymentMethod] = Field(alias="allowedPaymentMethods")
    merchant_info: MerchantInfo = Field(alias="merchantInfo")
    transaction_info: TransactionInfo = Field(alias="transactionInfo")


class ApiResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[str] = None

    def dump(self) -> dict:
        return self.model_dump(exclude_none=True)
