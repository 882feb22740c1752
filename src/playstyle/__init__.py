"""Style checker for Ansible playbooks."""
