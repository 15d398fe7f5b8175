from edgegrid_provider.errors import ProviderError
from edgegrid_provider.interfaces.runner import BaseRunner
from edgegrid_provider.resource_data import ResourceData


class DataSourceRunner(BaseRunner):
    """
    Runs a read-only lookup. Data sources never report a change.
    """

    def run(self):
        data = ResourceData.from_params(self.mapper.schema, self.module.params)
        try:
            self.mapper.read(data)
        except ProviderError as e:
            self.fail(e)
            return
        self.module.exit_json(changed=False, id=data.id or None, data=data.to_dict())
