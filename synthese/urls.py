# synthese/urls.py
from django.urls import include, path
from rest_framework.routers import SimpleRouter

from synthese.views import SyntheseViewSet

app_name = 'synthese'

router = SimpleRouter()
router.register(r'', SyntheseViewSet, basename='synthese')

urlpatterns = [
    path('', include(router.urls)),
]
