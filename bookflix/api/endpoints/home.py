from fastapi import APIRouter, Depends

from bookflix.api.deps import get_home_builder
from bookflix.services.home import HomeFeedBuilder, HomeRow

router = APIRouter(tags=["home"])


@router.get("/home", response_model=list[HomeRow])
async def get_home(builder: HomeFeedBuilder = Depends(get_home_builder)) -> list[HomeRow]:
    return builder.build()
