# common/utils.py
"""Calculs dérivés communs aux saisies de participation et de résultats"""


def taux_participation(nombre_votant, nombre_inscrit):
    """Taux de participation en pourcentage, None si aucun inscrit"""
    if not nombre_inscrit:
        return None
    return round((nombre_votant or 0) / nombre_inscrit * 100, 2)


def taux_abstention(nombre_votant, nombre_inscrit):
    taux = taux_participation(nombre_votant, nombre_inscrit)
    if taux is None:
        return None
    return round(100 - taux, 2)


def suffrage_exprime(nombre_votant, bulletin_nul):
    return (nombre_votant or 0) - (bulletin_nul or 0)


def pourcentage(part, total):
    """Part en pourcentage arrondie à 2 décimales (0 si total nul)"""
    if not total:
        return 0.0
    return round(part / total * 100, 2)


def champs_derives(data):
    """
    Complète un dictionnaire de saisie avec les champs calculés.

    Le taux de participation est toujours recalculé; le suffrage exprimé
    n'est déduit que s'il n'a pas été saisi.
    """
    data = dict(data)
    inscrits = data.get('nombre_inscrit')
    votants = data.get('nombre_votant')

    if votants is not None:
        data['taux_participation'] = taux_participation(votants, inscrits)
        if data.get('suffrage_exprime') is None:
            data['suffrage_exprime'] = suffrage_exprime(votants, data.get('bulletin_nul'))

    return data


def get_client_ip(request):
    """Récupère l'IP du client"""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')
