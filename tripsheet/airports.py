"""Static airport coordinates used by the route map."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

Coords = Tuple[float, float]

# (lat, lon) for common US and international charter airports.
AIRPORT_COORDS: Dict[str, Coords] = {
    # California
    "VNY": (34.2098, -118.4909), "LAX": (33.9425, -118.4081), "BUR": (34.2007, -118.3585),
    "SNA": (33.6757, -117.8676), "LGB": (33.8177, -118.1516), "ONT": (34.0560, -117.6012),
    "SJC": (37.3626, -121.9289), "SFO": (37.6213, -122.3790), "OAK": (37.7213, -122.2208),
    "SMF": (38.6954, -121.5908), "SAN": (32.7336, -117.1896), "FAT": (36.7762, -119.7181),
    "MRY": (36.5870, -121.8429), "SBA": (34.4262, -119.8404), "PSP": (33.8297, -116.5069),
    "TRM": (33.6267, -116.1597), "CRQ": (33.1283, -117.2800),
    # Northwest / Alaska / Hawaii
    "SEA": (47.4502, -122.3088), "PDX": (45.5898, -122.5951), "BOI": (43.5644, -116.2228),
    "ANC": (61.1743, -149.9962), "HNL": (21.3187, -157.9225), "OGG": (20.8986, -156.4305),
    # Mountain resorts
    "ASE": (39.2232, -106.8688), "EGE": (39.6426, -106.9177), "SUN": (43.5044, -114.2962),
    "JAC": (43.6073, -110.7377), "BZN": (45.7775, -111.1530), "MTJ": (38.5098, -107.8938),
    # Nevada / Arizona / Utah / Colorado
    "LAS": (36.0840, -115.1537), "PHX": (33.4373, -112.0078), "TUS": (32.1161, -110.9410),
    "SDL": (33.6229, -111.9105), "SLC": (40.7899, -111.9791), "DEN": (39.8561, -104.6737),
    "APA": (39.5702, -104.8490),
    # Texas / Gulf
    "DFW": (32.8998, -97.0403), "DAL": (32.8474, -96.8517), "IAH": (29.9902, -95.3368),
    "HOU": (29.6454, -95.2789), "AUS": (30.1975, -97.6664), "SAT": (29.5337, -98.4698),
    "ELP": (31.8072, -106.3779), "MSY": (29.9934, -90.2580),
    # Southeast
    "ATL": (33.6367, -84.4281), "MIA": (25.7959, -80.2870), "FLL": (26.0724, -80.1527),
    "MCO": (28.4294, -81.3090), "TPA": (27.9755, -82.5332), "PBI": (26.6832, -80.0956),
    "OPF": (25.9079, -80.2786), "SRQ": (27.3954, -82.5544), "RSW": (26.5362, -81.7553),
    "JAX": (30.4941, -81.6879), "BNA": (36.1245, -86.6782), "CLT": (35.2140, -80.9431),
    "RDU": (35.8776, -78.7875), "ORF": (36.8976, -76.0123), "FXE": (26.1973, -80.1707),
    "BCT": (26.3785, -80.1077), "APF": (26.1526, -81.7753),
    # Northeast
    "JFK": (40.6413, -73.7781), "LGA": (40.7769, -73.8740), "EWR": (40.6895, -74.1745),
    "TEB": (40.8501, -74.0608), "HPN": (41.0670, -73.7076), "SWF": (41.5041, -74.1048),
    "BOS": (42.3656, -71.0096), "PVD": (41.7240, -71.4283), "BDL": (41.9389, -72.6831),
    "PHL": (39.8744, -75.2424), "BWI": (39.1754, -76.6684), "DCA": (38.8512, -77.0402),
    "IAD": (38.9531, -77.4565), "PIT": (40.4915, -80.2329), "MMU": (40.7994, -74.4149),
    "FRG": (40.7288, -73.4134), "ISP": (40.7952, -73.1002), "ACK": (41.2531, -70.0602),
    "MVY": (41.3931, -70.6143),
    # Midwest
    "ORD": (41.9742, -87.9073), "MDW": (41.7868, -87.7522), "DTW": (42.2162, -83.3554),
    "MSP": (44.8848, -93.2223), "MKE": (42.9472, -87.8966), "STL": (38.7487, -90.3700),
    "CLE": (41.4117, -81.8498), "CVG": (39.0480, -84.6678), "IND": (39.7173, -86.2944),
    "CMH": (39.9980, -82.8919), "MCI": (39.2976, -94.7139), "OMA": (41.3032, -95.8940),
    # Mid-Atlantic / Carolinas
    "RIC": (37.5052, -77.3197), "CHS": (32.8987, -80.0405),
    # Canada
    "YYZ": (43.6777, -79.6248), "YUL": (45.4706, -73.7408), "YVR": (49.1967, -123.1815),
    # Caribbean / Mexico
    "MYNN": (25.0387, -77.4664), "MYEG": (24.3969, -76.8138), "NAS": (25.0387, -77.4664),
    "MKJP": (17.9357, -76.7875), "MMUN": (21.0365, -86.8771), "MMCA": (20.6804, -105.0120),
    "MMSD": (23.1518, -109.7211), "TJSJ": (18.4394, -66.0018), "TNCM": (18.0410, -63.1089),
    "TUPJ": (18.4446, -64.5430), "AXA": (18.2049, -63.0505),
    # Europe
    "EGLL": (51.4775, -0.4614), "EGKK": (51.1481, -0.1903), "EGGW": (51.8747, -0.3683),
    "LFPB": (48.9744, 2.4414), "LFPO": (48.7233, 2.3794), "LFMN": (43.6584, 7.2159),
    "LSGG": (46.2381, 6.1090), "EHAM": (52.3105, 4.7683),
    "EDDF": (50.0264, 8.5431), "EDDM": (48.3537, 11.7750),
    "LEMD": (40.4719, -3.5626), "LEAL": (38.2822, -0.5582),
    "LIRF": (41.8003, 12.2389), "LIME": (45.6739, 9.7042), "LIRA": (41.9527, 12.4957),
    # Middle East / Africa
    "OMDB": (25.2532, 55.3657), "OMAA": (24.4330, 54.6511), "OERK": (24.9576, 46.6988),
    "LLBG": (32.0114, 34.8867), "HECA": (30.1219, 31.4056),
    # Asia / Pacific
    "VTBS": (13.6811, 100.7477), "VHHH": (22.3080, 113.9185),
    "RJTT": (35.5494, 139.7798), "WSSS": (1.3644, 103.9915),
    "YSSY": (-33.9399, 151.1753), "YMML": (-37.6690, 144.8410),
}


def get_coords(code: Optional[str]) -> Optional[Coords]:
    """Resolve an airport code, retrying US ICAO codes without the ``K``."""

    if not code or not isinstance(code, str):
        return None
    clean = code.strip().upper()
    if clean in AIRPORT_COORDS:
        return AIRPORT_COORDS[clean]
    if clean.startswith("K"):
        return AIRPORT_COORDS.get(clean[1:])
    return None
