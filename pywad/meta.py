import logging


class Meta(object):
    """Class containing metadata about the record"""

    def __init__(self):
        self.fields = []

    @property
    def size(self):
        return sum(field.size for _, field in self.fields)


class MetaRecord(type):

    def __new__(cls, names, bases, attrs):
        '''Collect the fields in order of declaration, parents first.'''
        new_cls = super(MetaRecord, cls).__new__(cls, names, bases, attrs)

        new_cls._meta = Meta()

        # handle inheritance
        for parent in [_ for _ in bases if isinstance(_, MetaRecord)]:
            new_cls._meta.fields.extend(parent._meta.fields)

        for obj_name, obj in attrs.items():
            if hasattr(obj, 'contribute_to_record'):
                cls.logger.debug('contribute_to_record() found for field \'%s\'' % obj_name)
                obj.contribute_to_record(new_cls, obj_name)

        return new_cls

    logger = logging.getLogger(__name__)
