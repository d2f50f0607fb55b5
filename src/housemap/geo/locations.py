"""Static city/state coordinate table used when precise geocoding is unavailable.

Keys are normalized with :func:`city_state_key` / :func:`state_key`, so
lookups accept either USPS codes ("FL") or full state names ("Florida")
in any case and with any spacing.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml

from housemap.core.types import Coordinate, ResolutionTier

logger = logging.getLogger(__name__)

STATE_NAMES: dict[str, str] = {
    "alabama": "al", "alaska": "ak", "arizona": "az", "arkansas": "ar",
    "california": "ca", "colorado": "co", "connecticut": "ct", "delaware": "de",
    "district of columbia": "dc", "florida": "fl", "georgia": "ga", "hawaii": "hi",
    "idaho": "id", "illinois": "il", "indiana": "in", "iowa": "ia",
    "kansas": "ks", "kentucky": "ky", "louisiana": "la", "maine": "me",
    "maryland": "md", "massachusetts": "ma", "michigan": "mi", "minnesota": "mn",
    "mississippi": "ms", "missouri": "mo", "montana": "mt", "nebraska": "ne",
    "nevada": "nv", "new hampshire": "nh", "new jersey": "nj", "new mexico": "nm",
    "new york": "ny", "north carolina": "nc", "north dakota": "nd", "ohio": "oh",
    "oklahoma": "ok", "oregon": "or", "pennsylvania": "pa", "rhode island": "ri",
    "south carolina": "sc", "south dakota": "sd", "tennessee": "tn", "texas": "tx",
    "utah": "ut", "vermont": "vt", "virginia": "va", "washington": "wa",
    "west virginia": "wv", "wisconsin": "wi", "wyoming": "wy",
}

# Approximate geographic centers
STATE_CENTERS: dict[str, tuple[float, float]] = {
    "al": (32.8067, -86.7911), "ak": (61.3707, -152.4044),
    "az": (33.7298, -111.4312), "ar": (34.9697, -92.3731),
    "ca": (36.1162, -119.6816), "co": (39.0598, -105.3111),
    "ct": (41.5978, -72.7554), "de": (39.3185, -75.5071),
    "dc": (38.8974, -77.0268), "fl": (27.7663, -81.6868),
    "ga": (33.0406, -83.6431), "hi": (21.0943, -157.4983),
    "id": (44.2405, -114.4788), "il": (40.3495, -88.9861),
    "in": (39.8494, -86.2583), "ia": (42.0115, -93.2105),
    "ks": (38.5266, -96.7265), "ky": (37.6681, -84.6701),
    "la": (31.1695, -91.8678), "me": (44.6939, -69.3819),
    "md": (39.0639, -76.8021), "ma": (42.2302, -71.5301),
    "mi": (43.3266, -84.5361), "mn": (45.6945, -93.9002),
    "ms": (32.7416, -89.6787), "mo": (38.4561, -92.2884),
    "mt": (46.9219, -110.4544), "ne": (41.1254, -98.2681),
    "nv": (38.3135, -117.0554), "nh": (43.4525, -71.5639),
    "nj": (40.2989, -74.5210), "nm": (34.8405, -106.2485),
    "ny": (42.1657, -74.9481), "nc": (35.6301, -79.8064),
    "nd": (47.5289, -99.7840), "oh": (40.3888, -82.7649),
    "ok": (35.5653, -96.9289), "or": (44.5720, -122.0709),
    "pa": (40.5908, -77.2098), "ri": (41.6809, -71.5118),
    "sc": (33.8569, -80.9450), "sd": (44.2998, -99.4388),
    "tn": (35.7478, -86.6923), "tx": (31.0545, -97.5635),
    "ut": (40.1500, -111.8624), "vt": (44.0459, -72.7107),
    "va": (37.7693, -78.1700), "wa": (47.4009, -121.4905),
    "wv": (38.4912, -80.9545), "wi": (44.2685, -89.6165),
    "wy": (42.7560, -107.3025),
}

CITY_COORDINATES: dict[str, tuple[float, float]] = {
    # Florida
    "miami,fl": (25.7617, -80.1918),
    "miami beach,fl": (25.7907, -80.1300),
    "fort lauderdale,fl": (26.1224, -80.1373),
    "hollywood,fl": (26.0112, -80.1495),
    "pompano beach,fl": (26.2379, -80.1248),
    "boca raton,fl": (26.3683, -80.1289),
    "west palm beach,fl": (26.7153, -80.0534),
    "orlando,fl": (28.5383, -81.3792),
    "tampa,fl": (27.9506, -82.4572),
    "st. petersburg,fl": (27.7676, -82.6403),
    "saint petersburg,fl": (27.7676, -82.6403),
    "sarasota,fl": (27.3364, -82.5307),
    "naples,fl": (26.1420, -81.7948),
    "fort myers,fl": (26.6406, -81.8723),
    "jacksonville,fl": (30.3322, -81.6557),
    "tallahassee,fl": (30.4383, -84.2807),
    "gainesville,fl": (29.6516, -82.3248),
    "pensacola,fl": (30.4213, -87.2169),
    # Texas
    "houston,tx": (29.7604, -95.3698),
    "dallas,tx": (32.7767, -96.7970),
    "austin,tx": (30.2672, -97.7431),
    "san antonio,tx": (29.4241, -98.4936),
    "fort worth,tx": (32.7555, -97.3308),
    "el paso,tx": (31.7619, -106.4850),
    "plano,tx": (33.0198, -96.6989),
    "arlington,tx": (32.7357, -97.1081),
    "corpus christi,tx": (27.8006, -97.3964),
    "lubbock,tx": (33.5779, -101.8552),
    "laredo,tx": (27.5064, -99.5075),
    "mcallen,tx": (26.2034, -98.2300),
    # California
    "los angeles,ca": (34.0522, -118.2437),
    "san francisco,ca": (37.7749, -122.4194),
    "san diego,ca": (32.7157, -117.1611),
    "san jose,ca": (37.3382, -121.8863),
    "oakland,ca": (37.8044, -122.2712),
    "sacramento,ca": (38.5816, -121.4944),
    "fresno,ca": (36.7378, -119.7871),
    "long beach,ca": (33.7701, -118.1937),
    "bakersfield,ca": (35.3733, -119.0187),
    "anaheim,ca": (33.8366, -117.9143),
    "santa ana,ca": (33.7455, -117.8677),
    "irvine,ca": (33.6846, -117.8265),
    "riverside,ca": (33.9806, -117.3755),
    "san bernardino,ca": (34.1083, -117.2898),
    "pasadena,ca": (34.1478, -118.1445),
    "glendale,ca": (34.1425, -118.2551),
    "santa monica,ca": (34.0195, -118.4912),
    "palm springs,ca": (33.8303, -116.5453),
    # New York
    "new york,ny": (40.7128, -74.0060),
    "new york city,ny": (40.7128, -74.0060),
    "brooklyn,ny": (40.6782, -73.9442),
    "bronx,ny": (40.8448, -73.8648),
    "queens,ny": (40.7282, -73.7949),
    "staten island,ny": (40.5795, -74.1502),
    "buffalo,ny": (42.8864, -78.8784),
    "rochester,ny": (43.1566, -77.6088),
    "albany,ny": (42.6526, -73.7562),
    "syracuse,ny": (43.0481, -76.1474),
    # Northeast
    "boston,ma": (42.3601, -71.0589),
    "cambridge,ma": (42.3736, -71.1097),
    "worcester,ma": (42.2626, -71.8023),
    "providence,ri": (41.8240, -71.4128),
    "hartford,ct": (41.7658, -72.6734),
    "new haven,ct": (41.3083, -72.9279),
    "newark,nj": (40.7357, -74.1724),
    "jersey city,nj": (40.7178, -74.0431),
    "philadelphia,pa": (39.9526, -75.1652),
    "pittsburgh,pa": (40.4406, -79.9959),
    "baltimore,md": (39.2904, -76.6122),
    "washington,dc": (38.9072, -77.0369),
    "portland,me": (43.6591, -70.2568),
    "burlington,vt": (44.4759, -73.2121),
    "manchester,nh": (42.9956, -71.4548),
    "wilmington,de": (39.7391, -75.5398),
    # Southeast
    "atlanta,ga": (33.7490, -84.3880),
    "savannah,ga": (32.0809, -81.0912),
    "charlotte,nc": (35.2271, -80.8431),
    "raleigh,nc": (35.7796, -78.6382),
    "durham,nc": (35.9940, -78.8986),
    "asheville,nc": (35.5951, -82.5515),
    "charleston,sc": (32.7765, -79.9311),
    "columbia,sc": (34.0007, -81.0348),
    "greenville,sc": (34.8526, -82.3940),
    "myrtle beach,sc": (33.6891, -78.8867),
    "nashville,tn": (36.1627, -86.7816),
    "memphis,tn": (35.1495, -90.0490),
    "knoxville,tn": (35.9606, -83.9207),
    "chattanooga,tn": (35.0456, -85.3097),
    "birmingham,al": (33.5186, -86.8104),
    "montgomery,al": (32.3792, -86.3077),
    "mobile,al": (30.6954, -88.0399),
    "huntsville,al": (34.7304, -86.5861),
    "jackson,ms": (32.2988, -90.1848),
    "new orleans,la": (29.9511, -90.0715),
    "baton rouge,la": (30.4515, -91.1871),
    "louisville,ky": (38.2527, -85.7585),
    "lexington,ky": (38.0406, -84.5037),
    "richmond,va": (37.5407, -77.4360),
    "virginia beach,va": (36.8529, -75.9780),
    "norfolk,va": (36.8508, -76.2859),
    "arlington,va": (38.8816, -77.0910),
    "charleston,wv": (38.3498, -81.6326),
    "little rock,ar": (34.7465, -92.2896),
    # Midwest
    "chicago,il": (41.8781, -87.6298),
    "springfield,il": (39.7817, -89.6501),
    "detroit,mi": (42.3314, -83.0458),
    "grand rapids,mi": (42.9634, -85.6681),
    "ann arbor,mi": (42.2808, -83.7430),
    "columbus,oh": (39.9612, -82.9988),
    "cleveland,oh": (41.4993, -81.6944),
    "cincinnati,oh": (39.1031, -84.5120),
    "toledo,oh": (41.6528, -83.5379),
    "indianapolis,in": (39.7684, -86.1581),
    "fort wayne,in": (41.0793, -85.1394),
    "milwaukee,wi": (43.0389, -87.9065),
    "madison,wi": (43.0731, -89.4012),
    "minneapolis,mn": (44.9778, -93.2650),
    "st. paul,mn": (44.9537, -93.0900),
    "saint paul,mn": (44.9537, -93.0900),
    "des moines,ia": (41.5868, -93.6250),
    "kansas city,mo": (39.0997, -94.5786),
    "st. louis,mo": (38.6270, -90.1994),
    "saint louis,mo": (38.6270, -90.1994),
    "kansas city,ks": (39.1141, -94.6275),
    "wichita,ks": (37.6872, -97.3301),
    "omaha,ne": (41.2565, -95.9345),
    "lincoln,ne": (40.8136, -96.7026),
    "fargo,nd": (46.8772, -96.7898),
    "sioux falls,sd": (43.5446, -96.7311),
    # Mountain / Southwest
    "denver,co": (39.7392, -104.9903),
    "boulder,co": (40.0150, -105.2705),
    "colorado springs,co": (38.8339, -104.8214),
    "aurora,co": (39.7294, -104.8319),
    "phoenix,az": (33.4484, -112.0740),
    "scottsdale,az": (33.4942, -111.9261),
    "tucson,az": (32.2226, -110.9747),
    "mesa,az": (33.4152, -111.8315),
    "las vegas,nv": (36.1699, -115.1398),
    "reno,nv": (39.5296, -119.8138),
    "salt lake city,ut": (40.7608, -111.8910),
    "albuquerque,nm": (35.0844, -106.6504),
    "santa fe,nm": (35.6870, -105.9378),
    "boise,id": (43.6150, -116.2023),
    "billings,mt": (45.7833, -108.5007),
    "cheyenne,wy": (41.1400, -104.8202),
    "oklahoma city,ok": (35.4676, -97.5164),
    "tulsa,ok": (36.1540, -95.9928),
    # Pacific Northwest / non-contiguous
    "seattle,wa": (47.6062, -122.3321),
    "tacoma,wa": (47.2529, -122.4443),
    "spokane,wa": (47.6588, -117.4260),
    "bellevue,wa": (47.6101, -122.2015),
    "portland,or": (45.5152, -122.6784),
    "eugene,or": (44.0521, -123.0868),
    "anchorage,ak": (61.2181, -149.9003),
    "honolulu,hi": (21.3069, -157.8583),
}

_WHITESPACE = re.compile(r"\s+")


def _clean(value: str | None) -> str:
    if not value:
        return ""
    return _WHITESPACE.sub(" ", value.strip().lower())


def normalize_state(state: str | None) -> str:
    """Return the lowercase USPS code for a state code or full name, or ''."""
    cleaned = _clean(state).rstrip(".")
    if not cleaned:
        return ""
    if cleaned in STATE_NAMES:
        return STATE_NAMES[cleaned]
    return cleaned


def state_key(state: str | None) -> str:
    return normalize_state(state)


def city_state_key(city: str | None, state: str | None) -> str:
    """Build the normalized ``"city,st"`` lookup key, or '' if either part is missing."""
    city_part = _clean(city)
    state_part = normalize_state(state)
    if not city_part or not state_part:
        return ""
    return f"{city_part},{state_part}"


class StaticLocationTable:
    """Read-only city/state → coordinate lookup.

    Args:
        cities: Override for the city table. Defaults to ``CITY_COORDINATES``.
        states: Override for the state-center table. Defaults to ``STATE_CENTERS``.
        extra_path: Optional YAML file whose ``cities`` and ``states``
            mappings extend the built-in tables.
    """

    def __init__(
        self,
        cities: dict[str, tuple[float, float]] | None = None,
        states: dict[str, tuple[float, float]] | None = None,
        extra_path: str | Path | None = None,
    ) -> None:
        self._cities: dict[str, Coordinate] = {}
        self._states: dict[str, Coordinate] = {}
        for key, (lat, lng) in (cities if cities is not None else CITY_COORDINATES).items():
            city, _, state = key.partition(",")
            self._cities[city_state_key(city, state)] = Coordinate(latitude=lat, longitude=lng)
        for key, (lat, lng) in (states if states is not None else STATE_CENTERS).items():
            self._states[state_key(key)] = Coordinate(latitude=lat, longitude=lng)
        if extra_path:
            self._load_extra(Path(extra_path))

    def _load_extra(self, path: Path) -> None:
        if not path.exists():
            logger.warning("Extra locations file %s does not exist; skipping", path)
            return
        with open(path) as fh:
            data = yaml.safe_load(fh) or {}
        for key, pair in (data.get("cities") or {}).items():
            city, _, state = str(key).partition(",")
            norm = city_state_key(city, state)
            if norm:
                self._cities[norm] = Coordinate(latitude=float(pair[0]), longitude=float(pair[1]))
        for key, pair in (data.get("states") or {}).items():
            norm = state_key(str(key))
            if norm:
                self._states[norm] = Coordinate(latitude=float(pair[0]), longitude=float(pair[1]))
        logger.info("Loaded extra locations from %s", path)

    def lookup_city(self, city: str | None, state: str | None) -> Coordinate | None:
        key = city_state_key(city, state)
        if not key:
            return None
        return self._cities.get(key)

    def lookup_state(self, state: str | None) -> Coordinate | None:
        key = state_key(state)
        if not key:
            return None
        return self._states.get(key)

    def lookup(
        self, city: str | None, state: str | None
    ) -> tuple[Coordinate, ResolutionTier] | None:
        """Try city+state first, then the bare state center.

        Returns the coordinate with the tier that produced it, or None when
        both miss.
        """
        coord = self.lookup_city(city, state)
        if coord is not None:
            return coord, ResolutionTier.CITY_STATE
        coord = self.lookup_state(state)
        if coord is not None:
            return coord, ResolutionTier.STATE_CENTER
        return None

    @property
    def city_count(self) -> int:
        return len(self._cities)

    @property
    def state_count(self) -> int:
        return len(self._states)
