from django.apps import AppConfig


class SyntheseConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'synthese'
    verbose_name = 'Synthèse des résultats'

    def ready(self):
        import synthese.signals  # noqa
