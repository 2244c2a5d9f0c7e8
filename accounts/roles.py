# accounts/roles.py
"""
Matrice des permissions par rôle.

Pour chaque rôle : les actions autorisées par type d'entité et le
périmètre territorial sur lequel elles s'exercent.
"""

# ===== RÔLES =====

ADMINISTRATEUR = 'ADMINISTRATEUR'
SUPERVISEUR_REGIONAL = 'SUPERVISEUR_REGIONAL'
SUPERVISEUR_DEPARTEMENTAL = 'SUPERVISEUR_DEPARTEMENTAL'
VALIDATEUR = 'VALIDATEUR'
SCRUTATEUR = 'SCRUTATEUR'
OBSERVATEUR_LOCAL = 'OBSERVATEUR_LOCAL'

ROLE_CHOICES = [
    (ADMINISTRATEUR, 'Administrateur'),
    (SUPERVISEUR_REGIONAL, 'Superviseur régional'),
    (SUPERVISEUR_DEPARTEMENTAL, 'Superviseur départemental'),
    (VALIDATEUR, 'Validateur'),
    (SCRUTATEUR, 'Scrutateur'),
    (OBSERVATEUR_LOCAL, 'Observateur local'),
]

# Rôles autorisés à modifier des données sur leur territoire
ROLES_EDITION = [SUPERVISEUR_REGIONAL, SUPERVISEUR_DEPARTEMENTAL, SCRUTATEUR, VALIDATEUR]

# ===== ENTITÉS ET ACTIONS =====

ARRONDISSEMENT = 'ARRONDISSEMENT'
PV = 'PV'
PARTICIPATION = 'PARTICIPATION'
REDRESSEMENT_BUREAU = 'REDRESSEMENT_BUREAU'
REDRESSEMENT_CANDIDAT = 'REDRESSEMENT_CANDIDAT'
RESULTAT = 'RESULTAT'

ENTITES = [ARRONDISSEMENT, PV, PARTICIPATION, REDRESSEMENT_BUREAU, REDRESSEMENT_CANDIDAT, RESULTAT]

CREER = 'creer'
LIRE = 'lire'
MODIFIER = 'modifier'
SUPPRIMER = 'supprimer'
VALIDER = 'valider'
APPROUVER = 'approuver'
REJETER = 'rejeter'

ACTIONS_ECRITURE = {CREER, MODIFIER, SUPPRIMER}

# ===== PÉRIMÈTRES =====

PERIMETRE_PROPRE = 'PROPRE'
PERIMETRE_DEPARTEMENT = 'DEPARTEMENT'
PERIMETRE_REGION = 'REGION'
PERIMETRE_TOUT = 'TOUT'


def _matrice(actions, entites=ENTITES):
    return {entite: frozenset(actions) for entite in entites}


ROLE_PERMISSIONS = {
    ADMINISTRATEUR: {
        'perimetre': PERIMETRE_TOUT,
        'entites': _matrice([CREER, LIRE, MODIFIER, SUPPRIMER, VALIDER, APPROUVER, REJETER]),
    },
    SUPERVISEUR_REGIONAL: {
        'perimetre': PERIMETRE_REGION,
        'entites': _matrice([CREER, LIRE, MODIFIER, SUPPRIMER, VALIDER, REJETER]),
    },
    SUPERVISEUR_DEPARTEMENTAL: {
        'perimetre': PERIMETRE_DEPARTEMENT,
        'entites': _matrice([CREER, LIRE, MODIFIER, SUPPRIMER, VALIDER, REJETER]),
    },
    VALIDATEUR: {
        'perimetre': PERIMETRE_DEPARTEMENT,
        'entites': _matrice([LIRE, VALIDER, APPROUVER, REJETER]),
    },
    SCRUTATEUR: {
        'perimetre': PERIMETRE_PROPRE,
        'entites': {
            **_matrice([CREER, LIRE, MODIFIER], [PV, PARTICIPATION, REDRESSEMENT_BUREAU,
                                                 REDRESSEMENT_CANDIDAT]),
            ARRONDISSEMENT: frozenset([LIRE]),
            RESULTAT: frozenset([CREER, LIRE, MODIFIER]),
        },
    },
    OBSERVATEUR_LOCAL: {
        'perimetre': PERIMETRE_PROPRE,
        'entites': _matrice([LIRE]),
    },
}


def get_role_permissions(role):
    """Retourne la configuration de permissions d'un rôle (None si inconnu)"""
    return ROLE_PERMISSIONS.get(role)


def has_permission(role, entite, action):
    """Vérifie qu'un rôle peut effectuer une action sur un type d'entité"""
    config = get_role_permissions(role)
    if config is None:
        return False
    return action in config['entites'].get(entite, frozenset())


def can_access_entity(role, entite):
    return has_permission(role, entite, LIRE)


def can_modify_entity(role, entite):
    return any(has_permission(role, entite, action) for action in ACTIONS_ECRITURE)


def get_perimetre(role):
    config = get_role_permissions(role)
    return config['perimetre'] if config else None
