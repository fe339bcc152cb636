import pytest

from anyclient.models import (
    InvalidObjectIDError,
    InvalidParameterError,
    InvalidSpaceIDError,
    InvalidTypeIDError,
    Object,
    SortOptions,
    TypeInfo,
)
from anyclient.params import (
    DEFAULT_SEARCH_LIMIT,
    DEFAULT_SEARCH_OFFSET,
    CreateObjectParams,
    DeleteObjectParams,
    GetMembersParams,
    GetObjectParams,
    GetSpaceByIDParams,
    GetSpacesParams,
    GetTypeByNameParams,
    GetTypesParams,
    SearchParams,
    UpdateObjectParams,
    new_get_spaces_params,
    new_search_params,
)


def _valid_object():
    return Object(id="obj1", type=TypeInfo(key="ot-note"))


def test_new_search_params_defaults():
    params = new_search_params()
    assert params.limit == DEFAULT_SEARCH_LIMIT
    assert params.offset == DEFAULT_SEARCH_OFFSET
    assert params.types == [] and params.tags == []
    assert params.sort is None


@pytest.mark.parametrize("limit,offset", [(-1, 0), (0, -1), (-5, -5)])
def test_search_params_negative_values_rejected(limit, offset):
    with pytest.raises(InvalidParameterError):
        SearchParams(limit=limit, offset=offset).validate()


def test_search_params_zero_values_accepted():
    params = SearchParams(limit=0, offset=0)
    params.validate()
    assert (params.limit, params.offset) == (0, 0)


def test_search_params_copy_is_independent():
    original = SearchParams(
        query="q", types=["ot-note"], tags=["work"],
        sort=SortOptions(property="name", direction="asc"), limit=25,
    )
    clone = original.copy()
    assert clone == original
    clone.types.append("ot-page")
    clone.tags.append("home")
    clone.sort.direction = "desc"
    assert original.types == ["ot-note"]
    assert original.tags == ["work"]
    assert original.sort.direction == "asc"


def test_get_object_params_validation():
    GetObjectParams(space_id="s", object_id="o").validate()
    with pytest.raises(InvalidSpaceIDError):
        GetObjectParams(object_id="o").validate()
    with pytest.raises(InvalidObjectIDError):
        GetObjectParams(space_id="s").validate()


def test_create_object_params_validation():
    with pytest.raises(InvalidSpaceIDError):
        CreateObjectParams(object=_valid_object()).validate()
    with pytest.raises(InvalidParameterError):
        CreateObjectParams(space_id="s").validate()
    with pytest.raises(InvalidTypeIDError):
        CreateObjectParams(space_id="s", object=Object(id="obj1")).validate()
    with pytest.raises(InvalidObjectIDError):
        CreateObjectParams(space_id="s", object=Object(type=TypeInfo(key="k"))).validate()


def test_create_object_params_valid():
    params = CreateObjectParams(space_id="s", object=_valid_object())
    params.validate()
    assert params.object.id == "obj1"


def test_update_object_params_validation():
    with pytest.raises(InvalidSpaceIDError):
        UpdateObjectParams(object_id="o", object=Object()).validate()
    with pytest.raises(InvalidObjectIDError):
        UpdateObjectParams(space_id="s", object=Object()).validate()
    with pytest.raises(InvalidParameterError):
        UpdateObjectParams(space_id="s", object_id="o").validate()
    # The object itself is not validated on update.
    params = UpdateObjectParams(space_id="s", object_id="o", object=Object())
    params.validate()
    assert params.object == Object()


def test_delete_object_params_validation():
    with pytest.raises(InvalidSpaceIDError):
        DeleteObjectParams(object_id="o").validate()
    with pytest.raises(InvalidObjectIDError):
        DeleteObjectParams(space_id="s").validate()


@pytest.mark.parametrize("cls", [GetSpaceByIDParams, GetTypesParams, GetMembersParams])
def test_space_only_params_require_space(cls):
    with pytest.raises(InvalidSpaceIDError):
        cls().validate()
    params = cls(space_id="s")
    params.validate()
    assert params.space_id == "s"


def test_get_type_by_name_params_validation():
    with pytest.raises(InvalidSpaceIDError):
        GetTypeByNameParams(type_name="Note").validate()
    with pytest.raises(InvalidTypeIDError):
        GetTypeByNameParams(space_id="s").validate()


def test_get_spaces_params_defaults():
    assert GetSpacesParams().include_members is False
    assert new_get_spaces_params().include_members is True