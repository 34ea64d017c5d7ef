from application.sync.sync_facade import SyncFacade, parse_item_id, require_user

__all__ = ["SyncFacade", "parse_item_id", "require_user"]
