"""
Reference data inserted on every build (idempotent, looked up by code).
"""

CATEGORIES = [
    {'code': 'COMP', 'name': 'Computing', 'description': 'Computers en rekenkracht', 'sort_order': 1},
    {'code': 'WORK', 'name': 'Werkplek', 'description': 'Werkplekaccessoires en randapparatuur', 'sort_order': 2},
    {'code': 'PERIPH', 'name': 'Peripherals', 'description': 'Printers, scanners en andere randapparatuur', 'sort_order': 3},
    {'code': 'NET', 'name': 'Networking', 'description': 'Netwerkapparatuur', 'sort_order': 4},
    {'code': 'MOBILE', 'name': 'Mobile', 'description': 'Mobiele apparaten', 'sort_order': 5},
    {'code': 'AV', 'name': 'Audio/Video', 'description': 'Audio- en videoapparatuur', 'sort_order': 6},
]

# (code, name, sort_order, category code)
ASSET_TYPES = [
    ('LAP', 'Laptop', 1, 'COMP'),
    ('DESK', 'Desktop', 2, 'COMP'),
    ('MON', 'Monitor', 3, 'WORK'),
    ('DOCK', 'Docking Station', 4, 'WORK'),
    ('KEYB', 'Keyboard', 5, 'WORK'),
    ('MOUSE', 'Mouse', 6, 'WORK'),
    ('TAB', 'Tablet', 7, 'MOBILE'),
    ('PRN', 'Printer', 8, 'PERIPH'),
    ('TEL', 'Telefoon', 9, 'MOBILE'),
    ('NET', 'Netwerk', 10, 'NET'),
]

BUILDINGS = [
    ('DBK', 'Gemeentehuis Diepenbeek'),
    ('WZC', 'WZC De Visserij'),
    ('GBS', 'Gemeentelijke Basisschool'),
    ('PLAG', 'Plaatselijk Comité'),
    ('BIB', 'Bibliotheek'),
    ('BKOR', 'Buitenschoolse kinderopvang Rooierheide'),
    ('BKOL', 'Buitenschoolse kinderopvang Lutselus'),
    ('BKOG', 'Buitenschoolse kinderopvang gemeenteschool'),
    ('OCL', 'Ontmoetingscentrum Lutselus'),
    ('OCR', 'Ontmoetingscentrum Rooierheide'),
    ('GILDE', 'Gildezaal'),
    ('KEI', 'Zaal de Kei'),
    ('TERL', 'Zaal Terloght'),
    ('HEIZ', 'Jeugdhuis Heizoe'),
    ('SENH', 'Seniorenhuis'),
    ('ROZEN', 'School Rozendaal'),
]

SECTORS = [
    ('ORG', 'Organisatie'),
    ('FIN', 'Financiën'),
    ('RUI', 'Ruimte'),
    ('MENS', 'Mens'),
    ('ZORG', 'Zorg'),
]

# (code, name, sector code)
SERVICES = [
    ('BSEC', 'Bestuurssecretariaat', 'ORG'),
    ('COM', 'Dienst Communicatie', 'ORG'),
    ('IT', 'Dienst IT', 'ORG'),
    ('ORGB', 'Dienst Organisatiebeheersing', 'ORG'),
    ('HR', 'Dienst HR', 'ORG'),
    ('PREV', 'Dienst Preventie - GIS & Noodplanning', 'ORG'),
    ('AANK', 'Dienst Aankopen', 'FIN'),
    ('FINZ', 'Dienst Financiën', 'FIN'),
    ('RO', 'Ruimtelijke Ontwikkeling', 'RUI'),
    ('INFRA', 'Infrastructuurprojecten', 'RUI'),
    ('FAC', 'Facilitaire Ondersteuning', 'RUI'),
    ('OD', 'Openbaar Domein', 'RUI'),
    ('BB', 'Beleven & Bewegen', 'MENS'),
    ('BURG', 'Burgerzaken', 'MENS'),
    ('GO', 'Gezin & Onderwijs', 'MENS'),
    ('GBS', 'Gemeentelijke Basisschool', 'MENS'),
    ('SOC', 'Sociale Dienst', 'MENS'),
    ('THUIS', 'Thuiszorg', 'ZORG'),
    ('ASWO', 'Assistentiewoningen', 'ZORG'),
    ('CDV', 'Centrum Dagverzorging', 'ZORG'),
    ('WZC', 'Woonzorgcentrum', 'ZORG'),
]

ASSET_TEMPLATES = [
    {'template_name': 'Dell Latitude Laptop', 'asset_name': 'Dell Latitude Laptop',
     'category': 'Computing', 'brand': 'Dell', 'model': 'Latitude 5420'},
    {'template_name': 'HP LaserJet Printer', 'asset_name': 'HP LaserJet Printer',
     'category': 'Peripherals', 'brand': 'HP', 'model': 'LaserJet Pro M404dn'},
    {'template_name': 'Cisco Network Switch', 'asset_name': 'Cisco Network Switch',
     'category': 'Networking', 'brand': 'Cisco', 'model': 'Catalyst 2960'},
    {'template_name': 'Samsung Monitor 27"', 'asset_name': 'Samsung Monitor 27"',
     'category': 'Displays', 'brand': 'Samsung', 'model': '27" LED Monitor'},
    {'template_name': 'Logitech Wireless Mouse', 'asset_name': 'Logitech Wireless Mouse',
     'category': 'Peripherals', 'brand': 'Logitech', 'model': 'MX Master 3'},
]
