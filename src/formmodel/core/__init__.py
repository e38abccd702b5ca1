"""
Core package for formmodel (record codec, descriptors, issue tree, formatters, decoder).

## Contracts
- Record codec — FormData <-> plain key -> value(s) record (`record`).
- Descriptors — form-coercible fields grouped into a model (`fields`).
- Schema helpers — pydantic metadata such as FromString and Refine filters (`annotations`).
- Struct — pydantic-backed struct schema and pydantic error translation (`struct`).
- Issue tree — tagged validation failure nodes (`issues`).
- Collector / formatters — actual values and messages per dotted path (`collect`, `formatter`).
- Decoder — FormData -> decoded dict or FormModelParseError (`decode`).

## Notes
- Zero-IO: stdlib, pydantic, starlette datastructures, and fastapi.UploadFile only.
- Only `decode` translates validator failures; a raw issue tree never leaves it.
- Dispatch over the issue tree uses `match` on the node dataclasses.

## Examples
```python
from typing import Annotated

from formmodel.core.annotations import IntFromString, greater_than_or_equal_to
from formmodel.core.decode import decode_form_model
from formmodel.core.errors import FormModelParseError
from formmodel.core.fields import FieldDescriptor, ModelDescriptor
from formmodel.core.record import from_record

AgeForm = ModelDescriptor(
    {"age": FieldDescriptor(Annotated[IntFromString, greater_than_or_equal_to(18)])}
)
decode = decode_form_model(AgeForm)
decode(from_record({"age": "18"}))  # {'age': 18}
try:
    decode(from_record({"age": "17"}))
except FormModelParseError as e:
    e.errors["age"].actual  # 17
```
"""
