from importlib import import_module


def get_output(name, config):
    """Instantiate the report output registered under ``name`` in ``output_modules``."""
    module_name, cls_name = config['output_modules'][name].rsplit('.', 1)
    return getattr(import_module(module_name), cls_name)(config)
