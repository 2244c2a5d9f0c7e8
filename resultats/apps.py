from django.apps import AppConfig


class ResultatsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'resultats'
    verbose_name = 'Résultats'
