from hypothesis import settings

# pytest settings
settings.register_profile('default', deadline=None)
settings.load_profile('default')
