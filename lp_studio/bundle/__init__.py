from .decoder import DecodeResult, ParsedBundle, decode
from .encoder import EncodeOptions, build_bundle, encode
