"""Takes a "homophonic" dataframe and converts it to a "midi" dataframe.

"Homophonic" dataframe has columns "onset" and "release"; subsequent columns are
understood to be voices, from lowest to highest.

"Midi" dataframe has columns "onset", "type", "pitch", "release", and "track",
with one row per note. The highest voice is on track 1.

>>> import pandas as pd
>>> homodf = pd.DataFrame(
...     {"onset": [0.0, 4.0], "release": [4.0, 8.0], "bass": [48, 47], "melody": [60, 62]}
... )
>>> homodf_to_mididf(homodf)  # doctest: +NORMALIZE_WHITESPACE
   onset  type  pitch  release  track
0    0.0  note     60      4.0      1
1    0.0  note     48      4.0      2
2    4.0  note     62      8.0      1
3    4.0  note     47      8.0      2
"""

import pandas as pd


def homodf_to_mididf(homodf: pd.DataFrame) -> pd.DataFrame:
    out = []
    voice_cols = list(
        reversed([col for col in homodf.columns if col not in ("onset", "release")])
    )
    # itertuples keeps the per-column dtypes, so pitches stay integers
    for row in homodf.itertuples(index=False):
        values = row._asdict()
        for i, voice_col in enumerate(voice_cols):
            out.append(
                {
                    "onset": values["onset"],
                    "type": "note",
                    "pitch": values[voice_col],
                    "release": values["release"],
                    "track": i + 1,
                }
            )
    return pd.DataFrame(out, columns=["onset", "type", "pitch", "release", "track"])
