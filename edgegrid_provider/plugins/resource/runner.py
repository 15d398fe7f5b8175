from edgegrid_provider.errors import ProviderError, UpstreamError
from edgegrid_provider.interfaces.runner import BaseRunner
from edgegrid_provider.resource_data import ResourceData


class ResourceRunner(BaseRunner):
    """
    Handles the execution logic for a managed object.

    The object is looked up through its identifier, either the `id` option or
    the one derived from the key attributes. Then, depending on `state`:

    - `present` and missing: create.
    - `present` and existing: update, but only when an input differs from the
      current state.
    - `absent` and existing: delete (or reset, for objects that cannot be
      removed).
    """

    def __init__(self, module, mapper):
        super().__init__(module, mapper)
        self.data = ResourceData.from_params(mapper.schema, module.params)
        self.current = None

    def run(self):
        # Step 1: Determine the current state of the object.
        try:
            self.check_existence()
        except ProviderError as e:
            self.fail(e)
            return

        # Step 2: If in check mode, predict changes without making them.
        if self.module.check_mode:
            self.handle_check_mode()
            return

        # Step 3: Execute actions based on current state and desired state.
        state = self.module.params.get("state") or "present"
        if self.current is not None:
            if state == "present":
                self.update()
            elif state == "absent":
                self.delete()
        elif state == "present":
            self.create()
        else:
            self.exit()

    def check_existence(self):
        """
        Reads the object addressed by the given or derived identifier.

        An identifier that was only derived from the inputs may point at
        nothing yet; a not-found answer then simply means the object is
        absent. A not-found answer for an explicit `id` is an error.
        """
        identifier = self.data.id
        derived = False
        if not identifier:
            identifier = self.mapper.identify(self.data)
            derived = True
        if not identifier:
            return

        current = ResourceData(self.mapper.schema, id=identifier)
        try:
            self.mapper.read(current)
        except UpstreamError as e:
            if derived and e.is_not_found:
                return
            raise

        self.current = current
        self.resource = current.to_dict()
        self.data.set_id(identifier)

    def create(self):
        try:
            self.mapper.create(self.data)
        except ProviderError as e:
            self.fail(e, id=None, resource=None)
            return
        self.has_changed = True
        self.resource = self.data.to_dict()
        self.exit()

    def update(self):
        try:
            if not self.mapper.needs_update(self.data, self.current):
                self.exit()
                return
            self.mapper.update(self.data)
        except ProviderError as e:
            # The last successfully read state is reported with the failure.
            self.fail(e, id=self.current.id, resource=self.resource)
            return
        self.has_changed = True
        self.resource = self.data.to_dict()
        self.exit()

    def delete(self):
        target = self.current
        try:
            self.mapper.delete(target)
        except ProviderError as e:
            self.fail(e, id=target.id, resource=self.resource)
            return
        self.has_changed = True
        self.resource = None
        self.data.clear_id()
        self.exit()

    def handle_check_mode(self):
        """
        Predicts changes for Ansible's --check mode without any write call.
        """
        state = self.module.params.get("state") or "present"
        if state == "present" and self.current is None:
            self.has_changed = True
        elif state == "absent" and self.current is not None:
            self.has_changed = True
        elif state == "present":
            try:
                self.has_changed = self.mapper.needs_update(self.data, self.current)
            except ProviderError as e:
                self.fail(e, id=self.current.id, resource=self.resource)
                return
        self.exit()

    def exit(self):
        self.module.exit_json(
            changed=self.has_changed, id=self.data.id or None, resource=self.resource
        )
