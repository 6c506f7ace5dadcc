from fastapi import Header

CREATOR_HEADER = "X-Creator"


async def get_creator(x_creator: str = Header(..., alias=CREATOR_HEADER, min_length=1, max_length=255)) -> str:
    """Creator tag (client or tenant) the request is made on behalf of."""
    return x_creator
