# accounts/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from accounts.views import TerritorialAccessViewSet

app_name = 'accounts'

router = DefaultRouter()
router.register(r'territorial-access', TerritorialAccessViewSet, basename='territorial-access')

urlpatterns = [
    path('', include(router.urls)),
]
