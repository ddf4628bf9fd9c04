from django.urls import path

from payments.views import CheckoutSessionView, MyPaymentsView, StripeWebhookView

app_name = "payments"

urlpatterns = [
    path("checkout-session/", CheckoutSessionView.as_view(), name="checkout-session"),
    path("webhook/stripe/", StripeWebhookView.as_view(), name="stripe-webhook"),
    path("mine/", MyPaymentsView.as_view(), name="my-payments"),
]
