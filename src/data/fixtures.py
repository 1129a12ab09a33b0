"""
Standard bathroom fixture library for floor-plan sketches
"""

# Default size (grid cells), label and colors for every placeable fixture type
STANDARD_FIXTURES = {
    'toilet': {
        'w': 1.8,
        'h': 3.5,
        'label': 'Toilet',
        'color': '#f0efe8',
        'stroke': '#8a8a8a',
        'shape': 'rect',
        'icon': '▭'
    },
    'sink': {
        'w': 2.5,
        'h': 2.0,
        'label': 'Sink',
        'color': '#dceef8',
        'stroke': '#7ab0cc',
        'shape': 'rect',
        'icon': '◯'
    },
    'bath': {
        'w': 8.5,
        'h': 3.5,
        'label': 'Bath',
        'color': '#c8dff5',
        'stroke': '#6a9cc0',
        'shape': 'rect',
        'icon': '▬'
    },
    'shower': {
        'w': 4.5,
        'h': 4.5,
        'label': 'Shower Tray',
        'color': '#d4f0ff',
        'stroke': '#70bbd4',
        'shape': 'rect',
        'icon': '▣'
    },
    'vanity': {
        'w': 3.0,
        'h': 2.5,
        'label': 'Vanity',
        'color': '#f0e8d8',
        'stroke': '#b09070',
        'shape': 'rect',
        'icon': '▤'
    },
    'door': {
        'w': 4.0,
        'h': 0.5,
        'label': 'Door',
        'color': '#f8e8a8',
        'stroke': '#c8a830',
        'shape': 'rect',
        'icon': '⌐'
    },
    'window': {
        'w': 5.0,
        'h': 0.5,
        'label': 'Window',
        'color': '#b8e8ff',
        'stroke': '#5090b8',
        'shape': 'rect',
        'icon': '⊟'
    },
    'soilstack': {
        'w': 0.8,
        'h': 0.8,
        'label': 'Soil Stack',  # Round soil pipe, drawn as a circle
        'color': '#b8b0a0',
        'stroke': '#706860',
        'shape': 'circle',
        'icon': '●'
    },
    'light': {
        'w': 1.0,
        'h': 1.0,
        'label': 'Light',
        'color': '#fffcb8',
        'stroke': '#c8c050',
        'shape': 'circle',
        'icon': '✦'
    }
}

# Palette order for the fixture sidebar
FIXTURE_ORDER = [
    'toilet', 'sink', 'bath', 'shower', 'vanity',
    'door', 'window', 'soilstack', 'light'
]

# Fallback for types that are not in the library (e.g. from newer documents)
UNKNOWN_FIXTURE_SHAPE = 'rect'


def get_fixture_defaults(fixture_type):
    """Get the library entry for a fixture type, or None if unknown"""
    return STANDARD_FIXTURES.get(fixture_type)


def get_fixture_shape(fixture_type):
    """'rect' or 'circle'; unknown types draw as a plain box"""
    entry = STANDARD_FIXTURES.get(fixture_type)
    if entry is None:
        return UNKNOWN_FIXTURE_SHAPE
    return entry['shape']
