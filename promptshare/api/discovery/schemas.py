# promptshare/api/discovery/schemas.py
from marshmallow import EXCLUDE, Schema, fields, validate, pre_load

from promptshare.api.discovery.ranking import SORT_OPTIONS, SORT_NEWEST
from promptshare.models.prompt import CATEGORIES, DIFFICULTIES
from promptshare.utils.datetime_utils import TIME_RANGE_DAYS

class DiscoveryQuerySchema(Schema):
    """
    GET /api/prompts, GET /api/prompts/random 쿼리 파라미터 검증.
    category / difficulty 는 반복 파라미터(?category=a&category=b) 또는 쉼표 구분 값을 받습니다.
    """
    class Meta:
        unknown = EXCLUDE  # page 등 알 수 없는 파라미터는 무시

    categories = fields.List(fields.Str(validate=validate.OneOf(CATEGORIES)), load_default=list)
    difficulties = fields.List(fields.Str(validate=validate.OneOf(DIFFICULTIES)), load_default=list)
    min_likes = fields.Int(load_default=0, validate=validate.Range(min=0))
    is_template = fields.Bool(load_default=False)
    featured = fields.Bool(load_default=False)
    time_range = fields.Str(load_default="all", validate=validate.OneOf(["all"] + list(TIME_RANGE_DAYS)))
    creative = fields.Bool(load_default=False)
    search = fields.Str(load_default=None, allow_none=True)
    sort_by = fields.Str(load_default=SORT_NEWEST, validate=validate.OneOf(SORT_OPTIONS))
    trending = fields.Bool(load_default=False)
    limit = fields.Int(load_default=None, allow_none=True, validate=validate.Range(min=1, max=500))

    @pre_load
    def _from_query_args(self, data, **kwargs):
        """MultiDict 형태의 request.args 를 일반 dict 로 바꿉니다."""
        if not hasattr(data, 'getlist'):
            return data
        parsed = {}
        for key in data.keys():
            if key in ('category', 'difficulty'):
                values = []
                for raw in data.getlist(key):
                    values.extend(v.strip() for v in raw.split(',') if v.strip())
                parsed['categories' if key == 'category' else 'difficulties'] = values
            else:
                parsed[key] = data.get(key)
        return parsed
