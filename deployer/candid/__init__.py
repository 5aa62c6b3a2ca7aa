# deployer/candid/__init__.py

from .values import Principal, Blob, Opt, Variant, Field, Record, record, tuple_record, opt
from .encoder import encode_value, encode_args, encode_text
from .parser import CandidParseError, parse_args, parse_value
