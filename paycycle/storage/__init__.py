from importlib import import_module


def get_storage(name, config):
    """Instantiate the storage backend registered under ``name`` in ``storage_modules``."""
    module_name, cls_name = config['storage_modules'][name].rsplit('.', 1)
    return getattr(import_module(module_name), cls_name)(config)
