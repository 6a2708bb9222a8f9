from course_checkout.intents import build_google_pay_intent


def test_google_pay_intent_shape(settings):
    intent = build_google_pay_intent(499, settings).model_dump(by_alias=True)

    assert intent["apiVersion"] == 2
    assert intent["apiVersionMinor"] == 0
    method = intent["allowedPaymentMethods"][0]
    assert method["type"] == "CARD"
    assert method["parameters"]["allowedAuthMethods"] == ["PAN_ONLY", "CRYPTOGRAM_3DS"]
    assert method["parameters"]["allowedCardNetworks"] == ["MASTERCARD", "VISA"]
    assert method["tokenizationSpecification"] == {
        "type": "PAYMENT_GATEWAY",
        "parameters": {"gateway": "example", "gatewayMerchantId": "BCR2DN4TXXXX"},
    }
    assert intent["merchantInfo"] == {"merchantId": "BCR2DN4TXXXX", "merchantName": "StudyNotion"}
    assert intent["transactionInfo"] == {
        "totalPriceStatus": "FINAL",
        "totalPrice": "499",
        "currencyCode": "INR",
    }


def test_price_is_stringified(settings):
    intent = build_google_pay_intent(1299.5, settings)
    assert intent.transaction_info.total_price == "1299.5"


def test_currency_follows_settings(settings):
    settings.currency_code = "USD"
    intent = build_google_pay_intent(10, settings)
    assert intent.transaction_info.currency_code == "USD"
