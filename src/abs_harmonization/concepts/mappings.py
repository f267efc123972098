"""
Default concept registry for the Asian Barometer Survey, waves 2-6.

This table is the versioned source of truth for cross-wave concept
mappings. Edit it deliberately: harmonized outputs are regenerated from it.

Harmonization families record how each question battery is scaled in each
wave:

- economic (q1-q6): W2 runs 1=very bad..5=very good; W3-W6 run the other
  way round.
- trust (q7-q19): W2 is 4pt 1=none..4=a great deal; W3 and W5 are 6pt
  1=trust fully..6=distrust fully; W4 and W6 are 4pt 1=a great deal..4=none.
- social_trust (q24-q27): follows the institutional trust pattern.

The W5 entries are taken from wave-level notes and have not been checked
question by question against the W5 codebook.
"""

from typing import Dict, List, Optional, Tuple

from ..cleaning.scales import Direction, ScaleSpec
from ..data.waves import Wave
from .registry import ConceptMapping, ConceptRegistry, HarmonizationFamily


ASC = Direction.ASCENDING
DESC = Direction.DESCENDING

TRUST_ANCHORS = {4: ('none', 'great deal'), 6: ('distrust', 'trust fully')}
TRUST_SCALES = {
    Wave.W2: ScaleSpec(4, ASC),
    Wave.W3: ScaleSpec(6, DESC),
    Wave.W4: ScaleSpec(4, DESC),
    Wave.W5: ScaleSpec(6, DESC),
    Wave.W6: ScaleSpec(4, DESC),
}


DEFAULT_FAMILIES: List[HarmonizationFamily] = [
    HarmonizationFamily(
        name='economic',
        variables=('q1', 'q2', 'q3', 'q4', 'q5', 'q6'),
        scales={
            Wave.W2: ScaleSpec(5, ASC),
            Wave.W3: ScaleSpec(5, DESC),
            Wave.W4: ScaleSpec(5, DESC),
            Wave.W5: ScaleSpec(5, DESC),
            Wave.W6: ScaleSpec(5, DESC),
        },
        anchors={5: ('worst', 'best')},
    ),
    HarmonizationFamily(
        name='trust',
        variables=tuple(f"q{i}" for i in range(7, 20)),
        scales=TRUST_SCALES,
        anchors=TRUST_ANCHORS,
    ),
    HarmonizationFamily(
        name='social_trust',
        variables=tuple(f"q{i}" for i in range(24, 28)),
        scales=TRUST_SCALES,
        anchors=TRUST_ANCHORS,
    ),
]


def _all_waves(var: str) -> Dict[Wave, str]:
    return {wave: var for wave in Wave}


def _waves(w2=None, w3=None, w4=None, w5=None, w6=None) -> Dict[Wave, Optional[str]]:
    return {Wave.W2: w2, Wave.W3: w3, Wave.W4: w4, Wave.W5: w5, Wave.W6: w6}


# (concept, description, variable_by_wave)
_ECONOMIC: List[Tuple[str, str, Dict]] = [
    ('econ_country_current', 'Economic condition of the country today', _all_waves('q1')),
    ('econ_country_change', 'Country economy compared to a few years ago', _all_waves('q2')),
    ('econ_country_future', 'Country economy in a few years', _all_waves('q3')),
    ('econ_family_current', 'Economic situation of your family today', _all_waves('q4')),
    ('econ_family_change', 'Family economy compared to a few years ago', _all_waves('q5')),
    ('econ_family_future', 'Family economy in a few years', _all_waves('q6')),
]

_TRUST: List[Tuple[str, str, Dict]] = [
    ('trust_executive', 'Trust in the president/prime minister', _all_waves('q7')),
    ('trust_courts', 'Trust in the courts', _all_waves('q8')),
    ('trust_national_gov', 'Trust in the national government', _all_waves('q9')),
    ('trust_parties', 'Trust in political parties', _all_waves('q10')),
    ('trust_parliament', 'Trust in parliament', _all_waves('q11')),
    ('trust_civil_service', 'Trust in the civil service', _all_waves('q12')),
    ('trust_military', 'Trust in the military', _all_waves('q13')),
    ('trust_police', 'Trust in the police', _all_waves('q14')),
    ('trust_local_gov', 'Trust in local government', _all_waves('q15')),
    ('trust_election_commission', 'Trust in the election commission',
     _waves('q18', 'q16', 'q16', 'q18', 'q16')),
    ('trust_ngos', 'Trust in non-governmental organizations',
     _waves('q19', 'q17', 'q19', 'q17', 'q17')),
]

_SOCIAL_TRUST: List[Tuple[str, str, Dict]] = [
    ('trust_relatives', 'Trust in relatives', _waves('q24', 'q24', 'q25', 'q24', 'q24')),
    ('trust_neighbors', 'Trust in neighbours', _waves('q25', 'q25', 'q26', 'q25', 'q25')),
    ('trust_others', 'Trust in other people you interact with',
     _waves('q26', 'q26', 'q27', 'q26', 'q26')),
]

_POLITICS: List[Tuple[str, str, Dict]] = [
    ('voted_last_election', 'Voted in the last national election',
     _waves('q32', 'q32', 'q33', None, 'q33')),
    ('interest_politics', 'Interest in politics', _waves('q43', 'q43', 'q44', 'q47', 'q47')),
    ('follow_news', 'Follows news about politics', _waves('q44', 'q44', 'q45', 'q48', 'q48')),
    ('discuss_politics', 'Discusses politics with family or friends',
     _waves('q45', 'q48', 'q46', 'q49', 'q49')),
]

_DEMOCRACY: List[Tuple[str, str, Dict]] = [
    ('satisfaction_democracy', 'Satisfaction with the way democracy works',
     _waves('q93', 'q89', 'q92', 'q90', 'q90')),
    ('level_democracy', 'How democratic the country is today',
     _waves('q94', 'q90', 'q93', 'q91', 'q91')),
    ('democracy_suitable', 'Democracy is suitable for the country',
     _waves('q98', 'q94', 'q97', 'q95', 'q95')),
    ('satisfaction_government', 'Satisfaction with the current government',
     _waves('q99', 'q95', 'q98', 'q96', 'q96')),
    ('democracy_preferable', 'Democracy is always preferable',
     _waves('q121', 'q132', 'q125', 'q124', 'q124')),
]

_COVID: List[Tuple[str, str, Dict]] = [
    ('covid_infection', 'Respondent or family member infected with COVID-19', _waves(w6='q138')),
    ('covid_economic_impact', 'Economic impact of the pandemic on the household', _waves(w6='q140')),
    ('covid_trust_info', 'Trust in government COVID-19 information', _waves(w6='q141')),
    ('covid_gov_handling', 'Government handling of the pandemic', _waves(w6='q142')),
    ('covid_emergency_powers', 'Emergency powers justified during a pandemic', _waves(w6='q143a')),
    ('covid_postpone_elections', 'Postponing elections justified during a pandemic', _waves(w6='q143b')),
    ('covid_lockdown', 'Long-term lockdown justified during a pandemic', _waves(w6='q143c')),
    ('covid_vaccination', 'COVID-19 vaccination status', _waves(w6='q144')),
]


def _rows(
    domain: str,
    entries: List[Tuple[str, str, Dict]],
    scale_type: str,
    family: Optional[str] = None,
    notes: str = '',
) -> List[ConceptMapping]:
    return [
        ConceptMapping(
            concept=concept,
            domain=domain,
            description=description,
            variable_by_wave=variables,
            scale_type=scale_type,
            notes=notes,
            family=family,
        )
        for concept, description, variables in entries
    ]


DEFAULT_CONCEPT_MAPPINGS: List[ConceptMapping] = (
    _rows('economic', _ECONOMIC, '5pt', family='economic',
          notes='W3-W6 reversed relative to W2')
    + _rows('trust', _TRUST, '4pt/6pt', family='trust',
            notes='W3/W5 6pt reversed; W4/W6 4pt reversed')
    + _rows('trust', _SOCIAL_TRUST, '4pt/6pt', family='social_trust',
            notes='W4 numbering shifted by one')
    + [
        ConceptMapping(
            concept='general_trust',
            domain='trust',
            description='Most people can be trusted',
            variable_by_wave=_waves('q23', 'q22', 'q23', 'q22', 'q22'),
            scale_type='binary',
        )
    ]
    + _rows('politics', _POLITICS, 'ordinal')
    + _rows('democracy', _DEMOCRACY, 'ordinal')
    + _rows('covid', _COVID, 'categorical',
            notes='W6 only; verify numbering against the W6 codebook')
)


def default_registry() -> ConceptRegistry:
    """Build a fresh registry from the default tables."""
    return ConceptRegistry(DEFAULT_CONCEPT_MAPPINGS, DEFAULT_FAMILIES)
