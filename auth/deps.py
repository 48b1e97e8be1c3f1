from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from auth.jwt import get_current_member
from items.models import Member

MemberDep = Annotated[Member, Depends(get_current_member)]
