"""
Static Italian reference tables: province codes, month letters and cadastral codes.
"""

from types import MappingProxyType

PROVINCE_ITALIANE = (
    "AG", "AL", "AN", "AO", "AP", "AQ", "AR", "AT", "AV", "BA",
    "BG", "BI", "BL", "BN", "BO", "BR", "BS", "BT", "BZ", "CA",
    "CB", "CE", "CH", "CI", "CL", "CN", "CO", "CR", "CS", "CT",
    "CZ", "EN", "FC", "FE", "FG", "FI", "FM", "FR", "GE", "GO",
    "GR", "IM", "IS", "KR", "LC", "LE", "LI", "LO", "LT", "LU",
    "MB", "MC", "ME", "MI", "MN", "MO", "MS", "MT", "NA", "NO",
    "NU", "OG", "OR", "OT", "PA", "PC", "PD", "PE", "PG", "PI",
    "PN", "PO", "PR", "PT", "PU", "PV", "PZ", "RA", "RC", "RE",
    "RG", "RI", "RM", "RN", "RO", "SA", "SI", "SO", "SP", "SR",
    "SS", "SU", "SV", "TA", "TE", "TN", "TO", "TP", "TR", "TS",
    "TV", "UD", "VA", "VB", "VC", "VE", "VI", "VR", "VS", "VT",
    "VV",
)

_PROVINCE_SET = frozenset(PROVINCE_ITALIANE)


def is_provincia(code: str) -> bool:
    return code in _PROVINCE_SET


# Month of birth -> letter used in position 9 of the codice fiscale
MESI_CODICE_FISCALE = MappingProxyType({
    1: "A", 2: "B", 3: "C", 4: "D", 5: "E", 6: "H",
    7: "L", 8: "M", 9: "P", 10: "R", 11: "S", 12: "T",
})

# Municipality -> cadastral (Belfiore) code. Main cities only; others are unsupported.
COMUNI_CATASTALI = MappingProxyType({
    "ROMA": "H501",
    "MILANO": "F205",
    "NAPOLI": "F839",
    "TORINO": "L219",
    "PALERMO": "G273",
    "GENOVA": "D969",
    "BOLOGNA": "A944",
    "FIRENZE": "D612",
    "BARI": "A662",
    "CATANIA": "C351",
    "VENEZIA": "L736",
    "VERONA": "L781",
    "MESSINA": "F158",
    "PADOVA": "G224",
    "TRIESTE": "L424",
    "BRESCIA": "B157",
    "PARMA": "G337",
    "PRATO": "G999",
    "TARANTO": "L049",
    "MODENA": "F257",
    "REGGIO CALABRIA": "H224",
    "REGGIO EMILIA": "H223",
    "PERUGIA": "G478",
    "RAVENNA": "H199",
    "LIVORNO": "E625",
    "CAGLIARI": "B354",
    "FOGGIA": "D643",
    "RIMINI": "H294",
    "SALERNO": "H703",
    "FERRARA": "D548",
    "SASSARI": "I452",
    "LATINA": "E472",
    "GIUGLIANO IN CAMPANIA": "E054",
    "MONZA": "F704",
    "SIRACUSA": "I754",
    "PESCARA": "G482",
    "BERGAMO": "A794",
    "FORLÌ": "D704",
    "TRENTO": "L378",
    "VICENZA": "L840",
    "TERNI": "L117",
    "BOLZANO": "A952",
    "NOVARA": "F952",
    "PIACENZA": "G535",
    "ANCONA": "A271",
    "ANDRIA": "A285",
    "AREZZO": "A390",
    "UDINE": "L483",
    "CESENA": "C573",
    "LECCE": "E506",
    "PESARO": "G479",
})
