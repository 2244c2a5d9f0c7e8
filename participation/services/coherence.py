# participation/services/coherence.py
"""
Contrôles de cohérence des saisies de participation et de résultats.

Les fonctions sont pures : elles prennent des dictionnaires de saisie et
retournent un ResultatValidation. Les erreurs bloquent l'enregistrement
(sauf saisie forcée), les avertissements sont seulement signalés.
"""
from django.conf import settings

from common.utils import taux_participation

CHAMPS_IRREGULIERS = [
    'nombre_enveloppe_bulletins_differents',
    'nombre_bulletin_electeur_identifiable',
    'nombre_bulletin_enveloppes_signes',
    'nombre_enveloppe_non_elecam',
    'nombre_bulletin_non_elecam',
    'nombre_bulletin_sans_enveloppe',
    'nombre_enveloppe_vide',
]

LIBELLES = {
    'nombre_bureau_vote': "Le nombre de bureaux de vote",
    'nombre_inscrit': "Le nombre d'inscrits",
    'nombre_votant': "Le nombre de votants",
    'bulletin_nul': "Le nombre de bulletins nuls",
    'suffrage_exprime': "Le nombre de suffrages exprimés",
    'nombre_suffrages_valable': "Le nombre de suffrages valables",
    'nombre_enveloppe_urnes': "Le nombre d'enveloppes dans les urnes",
    'nombre_vote': "Le nombre de votes",
}


def _seuil(nom):
    return settings.ELECTION_COHERENCE[nom]


class ResultatValidation:
    """Erreurs bloquantes et avertissements issus d'un contrôle"""

    def __init__(self, erreurs=None, avertissements=None):
        self.erreurs = list(erreurs or [])
        self.avertissements = list(avertissements or [])

    @property
    def est_valide(self):
        return not self.erreurs

    def fusionner(self, autre):
        return ResultatValidation(
            self.erreurs + autre.erreurs,
            self.avertissements + autre.avertissements
        )

    def to_dict(self):
        return {
            'est_valide': self.est_valide,
            'erreurs': self.erreurs,
            'avertissements': self.avertissements,
        }

    def __repr__(self):
        return f"<ResultatValidation erreurs={len(self.erreurs)} avertissements={len(self.avertissements)}>"


def _negatifs(data, champs):
    erreurs = []
    for champ in champs:
        valeur = data.get(champ)
        if valeur is not None and valeur < 0:
            libelle = LIBELLES.get(champ, f"Le champ {champ}")
            erreurs.append(f"{libelle} ne peut pas être négatif ({valeur})")
    return erreurs


# ========== PARTICIPATION (PV DÉPARTEMENT / BUREAU) ==========

def valider_donnees_participation(data):
    """Contrôle d'une saisie de participation issue d'un PV"""
    erreurs = _negatifs(data, list(LIBELLES) + CHAMPS_IRREGULIERS)
    avertissements = []

    inscrits = data.get('nombre_inscrit') or 0
    votants = data.get('nombre_votant') or 0
    nuls = data.get('bulletin_nul') or 0
    exprimes = data.get('suffrage_exprime')
    taux = data.get('taux_participation')

    # Erreurs critiques
    if votants > inscrits:
        erreurs.append(
            f"Le nombre de votants ({votants}) dépasse le nombre d'inscrits ({inscrits})"
        )

    if nuls > votants:
        erreurs.append(
            f"Les bulletins nuls ({nuls}) dépassent le nombre de votants ({votants})"
        )

    if exprimes is not None and votants > 0 and nuls + exprimes != votants:
        erreurs.append(
            f"Bulletins nuls ({nuls}) + suffrages exprimés ({exprimes}) "
            f"= {nuls + exprimes} ≠ votants ({votants})"
        )

    if taux is not None and not 0 <= taux <= 100:
        erreurs.append(f"Le taux de participation ({taux}%) doit être compris entre 0 et 100")

    # Écarts fréquents sur les PV
    enveloppes = data.get('nombre_enveloppe_urnes')
    if enveloppes is not None and enveloppes != votants:
        avertissements.append(
            f"Enveloppes dans les urnes ({enveloppes}) différent du nombre de votants ({votants})"
        )

    if inscrits > 0:
        taux_calcule = taux_participation(votants, inscrits)
        if taux and abs(taux - taux_calcule) > _seuil('TOLERANCE_TAUX'):
            avertissements.append(
                f"Taux de participation saisi ({taux}%) différent du taux calculé ({taux_calcule:.2f}%)"
            )

        if votants / inscrits > _seuil('RATIO_PARTICIPATION_SUSPECT'):
            avertissements.append("Le taux de participation dépasse 105%, vérifier les chiffres")

    if votants > 0 and nuls / votants > _seuil('RATIO_BULLETINS_NULS_SUSPECT'):
        avertissements.append("Les bulletins nuls dépassent 10% des votants, valeur inhabituelle")

    if not inscrits:
        avertissements.append("Le nombre d'inscrits n'est pas renseigné")

    if not votants:
        avertissements.append("Le nombre de votants n'est pas renseigné")

    irreguliers = sum(data.get(champ) or 0 for champ in CHAMPS_IRREGULIERS)
    if irreguliers > votants:
        avertissements.append(
            f"La somme des bulletins irréguliers ({irreguliers}) dépasse le nombre de votants ({votants})"
        )

    return ResultatValidation(erreurs, avertissements)


# ========== RÉSULTATS D'UN BUREAU ==========

def valider_coherence_resultat(nombre_vote, participation, autres_votes=()):
    """
    Croise un nombre de voix avec la participation du bureau.

    `participation` est un dictionnaire (nombre_inscrit, nombre_votant,
    bulletin_nul, suffrage_exprime) ; `autres_votes` les voix des autres
    partis du même bureau.
    """
    erreurs = []
    avertissements = []

    inscrits = participation.get('nombre_inscrit') or 0
    votants = participation.get('nombre_votant') or 0
    nuls = participation.get('bulletin_nul') or 0
    exprimes = participation.get('suffrage_exprime')
    if exprimes is None:
        exprimes = votants - nuls

    if votants > inscrits:
        erreurs.append(
            f"Le nombre de votants ({votants}) dépasse le nombre d'inscrits ({inscrits})"
        )
    if nuls < 0:
        erreurs.append("Le nombre de bulletins nuls ne peut pas être négatif")
    if exprimes < 0:
        erreurs.append("Le nombre de suffrages exprimés ne peut pas être négatif")
    if nuls + exprimes != votants:
        erreurs.append(
            f"Bulletins nuls ({nuls}) + suffrages exprimés ({exprimes}) ≠ votants ({votants})"
        )
    if nombre_vote > exprimes:
        erreurs.append(
            f"Le nombre de voix ({nombre_vote}) dépasse les suffrages exprimés ({exprimes})"
        )

    total = nombre_vote + sum(autres_votes)
    if total > exprimes:
        erreurs.append(
            f"Le total des voix du bureau ({total}) dépasse les suffrages exprimés ({exprimes})"
        )
    elif total != exprimes:
        avertissements.append(
            f"Le total des voix du bureau ({total}) diffère des suffrages exprimés ({exprimes})"
        )

    return ResultatValidation(erreurs, avertissements)


def valider_vote(nombre_vote, autres_votes=()):
    """Contrôle d'un nombre de voix par rapport aux autres partis du bureau"""
    erreurs = []
    avertissements = []
    autres_votes = list(autres_votes)

    if nombre_vote < 0:
        erreurs.append("Le nombre de votes ne peut pas être négatif")

    if autres_votes:
        maximum = max(autres_votes)
        if maximum > 0 and nombre_vote > maximum * _seuil('FACTEUR_VOTE_SUSPECT'):
            avertissements.append(
                f"Le nombre de voix ({nombre_vote}) dépasse 10 fois le meilleur score "
                f"des autres partis ({maximum})"
            )

    total = nombre_vote + sum(autres_votes)
    if total > _seuil('SEUIL_TOTAL_VOTES_BUREAU'):
        avertissements.append(
            f"Le total des voix du bureau ({total}) est anormalement élevé"
        )

    return ResultatValidation(erreurs, avertissements)


# ========== PARTICIPATION PAR COMMUNE ==========

def valider_participation_commune(data):
    """Contrôle d'une saisie de participation agrégée par commune"""
    erreurs = []

    code = data.get('arrondissement')
    if not code or code <= 0:
        erreurs.append("Le code commune est requis")

    libelles = {
        'nombre_bureaux': "Le nombre de bureaux",
        'nombre_inscrits': "Le nombre d'inscrits",
        'nombre_votants': "Le nombre de votants",
        'bulletins_nuls': "Le nombre de bulletins nuls",
        'suffrages_valables': "Le nombre de suffrages valables",
    }
    for champ, libelle in libelles.items():
        valeur = data.get(champ)
        if valeur is not None and valeur < 0:
            erreurs.append(f"{libelle} ne peut pas être négatif")

    inscrits = data.get('nombre_inscrits')
    votants = data.get('nombre_votants')
    nuls = data.get('bulletins_nuls')
    valables = data.get('suffrages_valables')

    if inscrits and votants and votants > inscrits:
        erreurs.append("Le nombre de votants ne peut pas dépasser le nombre d'inscrits")

    if votants and nuls is not None and valables is not None and nuls + valables > votants:
        erreurs.append(
            "La somme des bulletins nuls et suffrages valables ne peut pas dépasser "
            "le nombre de votants"
        )

    return ResultatValidation(erreurs)
