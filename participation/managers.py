# participation/managers.py
from django.db import models


class ParticipationQuerySet(models.QuerySet):
    """QuerySet commun aux saisies de participation"""

    def incoherentes(self):
        return self.filter(has_incoherence=True)
