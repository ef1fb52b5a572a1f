from typing import Annotated

from pydantic import Field

from poolforge.constants import MAX_UINT8, MAX_UINT256, MIN_UINT8, MIN_UINT256

type ValidatedUint8 = Annotated[int, Field(strict=True, ge=MIN_UINT8, le=MAX_UINT8)]
type ValidatedUint256 = Annotated[int, Field(strict=True, ge=MIN_UINT256, le=MAX_UINT256)]
