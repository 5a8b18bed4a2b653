"""SQLAdmin model views and the sync tools page."""

from sqladmin import BaseView, ModelView, expose
from starlette.requests import Request
from starlette.responses import HTMLResponse

from tvshows.models import Distributor, ReleaseDate, TvShow
from tvshows.tasks.sync_job import is_sync_running, start_background_sync


class DistributorAdmin(ModelView, model=Distributor):
    column_list = [Distributor.id, Distributor.name, Distributor.created_at]
    column_searchable_list = [Distributor.name]
    column_sortable_list = [Distributor.name]


class TvShowAdmin(ModelView, model=TvShow):
    name_plural = "TV Shows"
    column_list = [
        TvShow.id,
        TvShow.external_id,
        TvShow.name,
        TvShow.show_type,
        TvShow.status,
        TvShow.rating,
        TvShow.distributor,
        TvShow.updated_at,
    ]
    column_searchable_list = [TvShow.name]
    column_sortable_list = [TvShow.name, TvShow.rating, TvShow.updated_at]
    # Rows are owned by the sync job
    can_create = False
    can_edit = False


class ReleaseDateAdmin(ModelView, model=ReleaseDate):
    column_list = [
        ReleaseDate.id,
        ReleaseDate.tv_show,
        ReleaseDate.country,
        ReleaseDate.release_date,
    ]
    column_searchable_list = [ReleaseDate.country]
    can_create = False
    can_edit = False


_TOOLS_TEMPLATE = """\
{% extends "sqladmin/layout.html" %}
{% block content %}
<div class="container-fluid p-4">
  <h2>Sync Tools</h2>
  <p>Sync running: <strong>{{ 'yes' if running else 'no' }}</strong></p>
  <form method="post" class="mt-3 d-flex align-items-center gap-2 flex-wrap">
    <button name="action" value="sync" class="btn btn-primary">Trigger Sync</button>
    <button name="action" value="full_refresh" class="btn btn-secondary">Trigger Full Refresh</button>
  </form>
  {% if message %}
  <div class="alert alert-{{ level }} mt-3">{{ message }}</div>
  {% endif %}
</div>
{% endblock %}
"""


class SyncToolsView(BaseView):
    name = "Sync"
    icon = "fa-rotate"

    @expose("/sync-tools", methods=["GET", "POST"])
    async def sync_tools(self, request: Request) -> HTMLResponse:
        message: str | None = None
        level = "success"

        if request.method == "POST":
            form = await request.form()
            action = form.get("action")
            if is_sync_running():
                message = "A sync is already running."
                level = "warning"
            elif action in ("sync", "full_refresh"):
                start_background_sync(force_full_refresh=action == "full_refresh")
                message = "Sync started in background."

        tmpl = self.templates.env.from_string(_TOOLS_TEMPLATE)
        content = await tmpl.render_async(
            request=request,
            message=message,
            level=level,
            running=is_sync_running(),
        )
        return HTMLResponse(content)
