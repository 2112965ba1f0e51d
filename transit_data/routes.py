"""
Hand-authored route table for Shivamogga city buses.
Each entry lists the stops in travel order, both endpoints included.
Entries are not symmetric: a pair may be stored in one direction only.
"""

from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

RouteKey = Tuple[str, str]


_ROUTES: Mapping[RouteKey, Tuple[str, ...]] = MappingProxyType({
    # From Gvt Bus Stand
    ('Gvt Bus Stand', 'Circuit House'): (
        'Gvt Bus Stand', 'Meghan Hospital', 'Circuit House',
    ),
    ('Gvt Bus Stand', 'Usha Nursing Home'): (
        'Gvt Bus Stand', 'Gandhi Bazzar', 'Nehru Road', 'Jail Road', 'Savalanga Road',
        'Court Circle', 'Nehru Stadium', 'Kamala Nursing Home', 'Usha Nursing Home',
    ),
    ('Gvt Bus Stand', 'Kamala Nursing Home'): (
        'Gvt Bus Stand', 'Gandhi Bazzar', 'Nehru Road', 'Jail Road', 'Savalanga Road',
        'Court Circle', 'Nehru Stadium', 'Kamala Nursing Home',
    ),
    ('Gvt Bus Stand', 'JNNC'): (
        'Gvt Bus Stand', 'Market', 'Church', 'Gurupura', 'Vinoba Nagara', 'JNNC',
    ),
    ('Gvt Bus Stand', 'Navle'): (
        'Gvt Bus Stand', 'Market', 'Church', 'Gurupura', 'Vinoba Nagara', 'JNNC',
        'Sheshadri Puram', 'Navle',
    ),
    ('Gvt Bus Stand', 'APMC'): (
        'Gvt Bus Stand', 'Draupadamma Circle', 'Gopala', 'Gopi Circle', 'Ragigudda', 'APMC',
    ),
    ('Gvt Bus Stand', 'Market'): ('Gvt Bus Stand', 'Market'),
    ('Gvt Bus Stand', 'Gandhi Bazzar'): ('Gvt Bus Stand', 'Gandhi Bazzar'),
    ('Gvt Bus Stand', 'Gopala'): ('Gvt Bus Stand', 'Draupadamma Circle', 'Gopala'),

    # From Market
    ('Market', 'JNNC'): ('Market', 'Church', 'Gurupura', 'Vinoba Nagara', 'JNNC'),
    ('Market', 'Usha Nursing Home'): (
        'Market', 'Gandhi Bazzar', 'Nehru Road', 'Jail Road', 'Savalanga Road',
        'Nehru Stadium', 'Kamala Nursing Home', 'Usha Nursing Home',
    ),
    ('Market', 'Gopala'): ('Market', 'Gvt Bus Stand', 'Draupadamma Circle', 'Gopala'),

    # From Gandhi Bazzar
    ('Gandhi Bazzar', 'Usha Nursing Home'): (
        'Gandhi Bazzar', 'Nehru Road', 'Jail Road', 'Savalanga Road', 'Court Circle',
        'Nehru Stadium', 'Kamala Nursing Home', 'Usha Nursing Home',
    ),
    ('Gandhi Bazzar', 'Kamala Nursing Home'): (
        'Gandhi Bazzar', 'Nehru Road', 'Jail Road', 'Savalanga Road', 'Nehru Stadium',
        'Kamala Nursing Home',
    ),
    ('Gandhi Bazzar', 'Gvt Bus Stand'): ('Gandhi Bazzar', 'Gvt Bus Stand'),

    # From JNNC
    ('JNNC', 'Gvt Bus Stand'): (
        'JNNC', 'Vinoba Nagara', 'Gurupura', 'Church', 'Market', 'Gvt Bus Stand',
    ),
    ('JNNC', 'APMC'): ('JNNC', 'Vinoba Nagara', 'Bommanakatte', 'APMC'),
    ('JNNC', 'Usha Nursing Home'): (
        'JNNC', 'Sheshadri Puram', 'Kamala Nursing Home', 'Usha Nursing Home',
    ),

    # From Kamala Nursing Home
    ('Kamala Nursing Home', 'Gvt Bus Stand'): (
        'Kamala Nursing Home', 'Nehru Stadium', 'Court Circle', 'Savalanga Road',
        'Jail Road', 'Nehru Road', 'Gandhi Bazzar', 'Gvt Bus Stand',
    ),
    ('Kamala Nursing Home', 'Market'): (
        'Kamala Nursing Home', 'Nehru Stadium', 'Savalanga Road', 'Jail Road',
        'Gandhi Bazzar', 'Market',
    ),
    ('Kamala Nursing Home', 'Usha Nursing Home'): ('Kamala Nursing Home', 'Usha Nursing Home'),

    # From Usha Nursing Home
    ('Usha Nursing Home', 'Gvt Bus Stand'): (
        'Usha Nursing Home', 'Kamala Nursing Home', 'Nehru Stadium', 'Court Circle',
        'Savalanga Road', 'Jail Road', 'Nehru Road', 'Gandhi Bazzar', 'Gvt Bus Stand',
    ),
    ('Usha Nursing Home', 'Market'): (
        'Usha Nursing Home', 'Kamala Nursing Home', 'Nehru Stadium', 'Savalanga Road',
        'Jail Road', 'Nehru Road', 'Gandhi Bazzar', 'Market',
    ),
    ('Usha Nursing Home', 'JNNC'): (
        'Usha Nursing Home', 'Kamala Nursing Home', 'Sheshadri Puram', 'JNNC',
    ),

    # From Gopala
    ('Gopala', 'Gvt Bus Stand'): ('Gopala', 'Draupadamma Circle', 'Gvt Bus Stand'),
    ('Gopala', 'APMC'): ('Gopala', 'Gopi Circle', 'Ragigudda', 'APMC'),
    ('Gopala', 'Market'): ('Gopala', 'Draupadamma Circle', 'Gvt Bus Stand', 'Market'),

    # From APMC
    ('APMC', 'Gvt Bus Stand'): (
        'APMC', 'Ragigudda', 'Gopi Circle', 'Gopala', 'Draupadamma Circle', 'Gvt Bus Stand',
    ),
    ('APMC', 'JNNC'): ('APMC', 'Bommanakatte', 'Vinoba Nagara', 'JNNC'),

    # From Vinoba Nagara
    ('Vinoba Nagara', 'Gvt Bus Stand'): (
        'Vinoba Nagara', 'Gurupura', 'Church', 'Market', 'Gvt Bus Stand',
    ),
    ('Vinoba Nagara', 'JNNC'): ('Vinoba Nagara', 'JNNC'),

    # From Navle
    ('Navle', 'Gvt Bus Stand'): (
        'Navle', 'Sheshadri Puram', 'JNNC', 'Vinoba Nagara', 'Gurupura', 'Church',
        'Market', 'Gvt Bus Stand',
    ),

    # From Sheshadri Puram
    ('Sheshadri Puram', 'Gvt Bus Stand'): (
        'Sheshadri Puram', 'JNNC', 'Vinoba Nagara', 'Gurupura', 'Church', 'Market',
        'Gvt Bus Stand',
    ),
    ('Sheshadri Puram', 'Kamala Nursing Home'): ('Sheshadri Puram', 'Kamala Nursing Home'),

    # Additional routes
    ('Circuit House', 'Market'): ('Circuit House', 'Gvt Bus Stand', 'Market'),
    ('Church', 'JNNC'): ('Church', 'Gurupura', 'Vinoba Nagara', 'JNNC'),
    ('Nehru Stadium', 'Gvt Bus Stand'): (
        'Nehru Stadium', 'Court Circle', 'Savalanga Road', 'Jail Road', 'Nehru Road',
        'Gandhi Bazzar', 'Gvt Bus Stand',
    ),
})


def get_route_entry(from_stop: str, to_stop: str) -> Optional[Tuple[str, ...]]:
    """Stored path for the directed pair, or None if the pair is not registered."""
    return _ROUTES.get((from_stop, to_stop))


def route_pairs() -> List[RouteKey]:
    return list(_ROUTES)
