# addresses/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from addresses.views import AddressViewSet

router = SimpleRouter()
router.register(r"", AddressViewSet, basename="addresses")

urlpatterns = [
    path("", include(router.urls)),
]
