# resultats/services/pv_service.py
import hashlib
import logging
import os

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from django.conf import settings
from django.db import transaction

from accounts.models import AuditLog
from common.exceptions import DocumentDuplique, TeleversementEchoue

logger = logging.getLogger(__name__)


class PVService:
    """Téléversement des PV scannés vers Cloudinary"""

    def verifier_fichier(self, fichier):
        """Contrôle l'extension et la taille du fichier"""
        extension = os.path.splitext(fichier.name)[1].lower()
        if extension not in settings.PV_UPLOAD_EXTENSIONS:
            raise ValueError(
                f"Extension {extension or '(aucune)'} non autorisée. "
                f"Formats acceptés: {', '.join(settings.PV_UPLOAD_EXTENSIONS)}"
            )

        if fichier.size > settings.PV_UPLOAD_MAX_SIZE:
            taille_max = settings.PV_UPLOAD_MAX_SIZE // (1024 * 1024)
            raise ValueError(f"Le fichier dépasse la taille maximale de {taille_max} Mo")

        if fichier.size == 0:
            raise ValueError("Le fichier est vide")

    def calculer_hash(self, fichier):
        """Empreinte SHA-256 du contenu"""
        empreinte = hashlib.sha256()
        for bloc in fichier.chunks():
            empreinte.update(bloc)
        fichier.seek(0)
        return empreinte.hexdigest()

    def envoyer(self, fichier, dossier):
        cloudinary.config(**settings.CLOUDINARY)
        try:
            return cloudinary.uploader.upload(
                fichier,
                folder=f"{settings.CLOUDINARY_FOLDER}/{dossier}",
                resource_type='auto'
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Échec du téléversement Cloudinary de {fichier.name}: {e}")
            raise TeleversementEchoue() from e

    @transaction.atomic
    def televerser(self, modele, fichier, user, libelle=None, **territoire):
        """
        Vérifie, téléverse et enregistre un PV scanné.

        `territoire` porte le rattachement du PV, par exemple
        arrondissement=<Arrondissement>.
        """
        self.verifier_fichier(fichier)

        hash_file = self.calculer_hash(fichier)
        existant = modele.objects.filter(hash_file=hash_file).first()
        if existant is not None:
            raise DocumentDuplique(f"Ce document a déjà été téléversé ({existant})")

        dossier = modele._meta.db_table
        resultat = self.envoyer(fichier, dossier)

        pv = modele.objects.create(
            libelle=libelle or fichier.name,
            url_pv=resultat['secure_url'],
            public_id=resultat['public_id'],
            hash_file=hash_file,
            nom_fichier=fichier.name,
            taille=fichier.size,
            code_createur=user,
            **territoire
        )

        AuditLog.log(
            user=user,
            action='PV_UPLOAD',
            description=f"Téléversement du PV {pv}",
            target=pv,
            details={'public_id': pv.public_id, 'hash': hash_file}
        )
        logger.info(f"PV {pv} téléversé par {user.email} ({pv.public_id})")
        return pv

    def supprimer(self, pv):
        """Supprime le PV et son fichier distant"""
        cloudinary.config(**settings.CLOUDINARY)
        try:
            cloudinary.uploader.destroy(pv.public_id)
        except cloudinary.exceptions.Error as e:
            logger.warning(f"Fichier Cloudinary {pv.public_id} non supprimé: {e}")
        pv.delete()


# Instance singleton
pv_service = PVService()
