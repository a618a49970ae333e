# mimiru

A recommendation engine for audio content. It works out which pieces a
listener should hear next by blending four signals:

- **collaborative filtering**: what similar listeners engaged with and the
  listener has not heard yet (`RecommendationReason.SIMILAR_USERS`)
- **content-based**: content in categories the listener strongly prefers
  (`RecommendationReason.CONTENT_BASED`)
- **popularity**: what was played most recently, scored by rank
  (`RecommendationReason.POPULAR`)
- **new content**: the newest content, with a small fixed score
  (`RecommendationReason.NEW_CONTENT`)

The blended list is sorted by score, trimmed to the requested size and kept in
a cache for an hour. Events for a user's playbacks or ratings can drop that
user's cached list, so the next request builds a fresh one.

## Installation

```
pip install mimiru
```

For the test suite:

```
pip install "mimiru[test]"
pytest
```

## Building blocks

| Module | What it holds |
| --- | --- |
| `mimiru.entities` | `User`, `AudioContent`, `PlaybackHistory`, `UserPreference`, `Recommendation`, `RecommendationSet`, `RecommendationReason` |
| `mimiru.repositories` | abstract repositories (`UserRepository`, `UserPreferenceRepository`, `AudioContentRepository`, `PlaybackRepository`, `RecommendationRepository`, `CacheRepository`) and `CacheMissError` |
| `mimiru.algorithm` | `RecommendationAlgorithmService`, the four generators |
| `mimiru.usecase` | `GetRecommendationsUsecase` with `GetRecommendationsInput`, `GetRecommendationsOutput` and `RecommendationError` |
| `mimiru.monitor` | `DatabaseMonitorService` and `DatabaseEvent`, which route change events to handlers |
| `mimiru.updater` | `RecommendationUpdaterService`, which drops cached lists on events |
| `mimiru.cache` | `RedisCache`, a JSON-over-Redis `CacheRepository`, and `redis_cache_from_env` |
| `mimiru.controller` | `RecommendationController`, which turns query parameters into a status and response body |
| `mimiru.errors`, `mimiru.response` | `AppError` with its code and HTTP status, repository errors, and the `ResponseWidget` JSON envelope |

## Usage

Implement the abstract repositories against your own storage, then wire the
pieces together:

```python
from mimiru.algorithm import RecommendationAlgorithmService
from mimiru.cache import redis_cache_from_env
from mimiru.usecase import GetRecommendationsInput, GetRecommendationsUsecase

cache = redis_cache_from_env()          # REDIS_URL as host:port, default localhost:6379
algorithm = RecommendationAlgorithmService(
    user_repo, audio_content_repo, playback_repo, user_pref_repo
)
usecase = GetRecommendationsUsecase(algorithm, cache, user_repo)

output = usecase.execute(GetRecommendationsInput(user_id=123, limit=20))
for rec in output.recommendations:
    print(rec.audio_content_id, rec.score, rec.reason.value)
```

A limit of zero or less falls back to 20. The limit is shared out across the
generators: half to collaborative, a third to content-based, a fifth to
popularity and a tenth to new content. Recommendations that are not valid
(no user, no content or a score of zero or less) are dropped.

A user id of zero or less, a failing user lookup or an unknown user raises
`RecommendationError`. A generator that raises is skipped. A cache that cannot
be read counts as a miss, and a cache that cannot be written is logged and
ignored. Cached values are stored through `GetRecommendationsOutput.to_dict()`
under the key `recommendations:user:<id>`.

`REDIS_URL` is read as a plain `host:port` address, not as a `redis://` URL.
`RedisCache` also works as a context manager and closes its client on exit.

### Answering requests

`RecommendationController.get_recommendations` takes the query parameters
(`user_id`, and optionally `limit`) as a mapping and returns the HTTP status
and the response envelope as a dictionary, ready to be encoded as JSON:

```python
from mimiru.controller import RecommendationController

controller = RecommendationController(usecase)
status, body = controller.get_recommendations({"user_id": "123", "limit": "10"})
```

A missing or non-numeric `user_id` gives a 400 with code `BAD_REQUEST`. A
`limit` that is missing, not a number or not positive becomes 20. Any error
from the use case, including a user id of zero or less, gives a 500 with code
`INTERNAL_SERVER_ERROR`. A success carries the output under `data`, with
`success`, `timestamp` and `service` alongside.

`mimiru.response.respond_with_exception` answers with the `AppError` found in
an exception's cause chain, or with a generic 500.

### Keeping caches fresh

```python
from mimiru.monitor import DatabaseEvent, DatabaseMonitorService
from mimiru.updater import RecommendationUpdaterService

monitor = DatabaseMonitorService()
RecommendationUpdaterService(cache).start_recommendation_updater(monitor)

monitor.dispatch(
    DatabaseEvent(table_name="playback_sessions", event_type="INSERT", data={"user_id": 123})
)
```

The updater handles events for the `playback_sessions` and `user_ratings`
tables. It reads `user_id` from the event data (an int, a float or a string of
digits) and deletes that user's cached list; events without a usable
`user_id` are ignored.

`handle_notification(channel, payload)` maps the channels
`playback_sessions_change` and `user_ratings_change` to those tables and
dispatches an event whose data is `{"payload": payload}`; other channels are
ignored and give `None`. Such events carry no `user_id`, so the updater does
not act on them: decode the payload yourself and dispatch an event with
`user_id` when you want the cache dropped.

Handlers run inline, or on a `concurrent.futures.Executor` passed to
`DatabaseMonitorService`. A handler that raises is logged and does not stop
the others.

## What this package does not do

- It has no storage of its own beyond the Redis cache: users, content,
  playback history and preferences come from repositories you implement.
- It has no HTTP server or command; the controller returns a status and body
  for your web framework to send.
- It does not listen to or poll a database for changes; you feed events to
  `DatabaseMonitorService` yourself.