from typing import Annotated
from fastapi import Path
from farmdirect.schemas.base import MAX_ID

# Path ids outside the INTEGER range are rejected with 422 before any query runs
IdPath = Annotated[int, Path(gt=0, le=MAX_ID)]
